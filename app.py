"""Streamlit UI for the AI Job Dashboard."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Coroutine

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobdash import actions
from jobdash.analysis import AnalysisClient
from jobdash.config import NotConfigured, validate_config
from jobdash.display import chips_html, site_label
from jobdash.export import EXPORT_FILENAME
from jobdash.identity import LocalIdentitySession
from jobdash.log import get_logger
from jobdash.resume_text import SUPPORTED_SUFFIXES, extract_bytes
from jobdash.session import Phase, SessionStore
from jobdash.store import get_store

log = get_logger(__name__)

_GLASS_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #2b1055 0%, #7597de 100%);
}
[data-testid="stSidebar"] {
    background: rgba(255,255,255,0.10);
    backdrop-filter: blur(16px);
    -webkit-backdrop-filter: blur(16px);
    border-right: 1px solid rgba(255,255,255,0.2);
}
[data-testid="stForm"],
[data-testid="stExpander"] {
    background: rgba(255,255,255,0.10);
    backdrop-filter: blur(10px);
    -webkit-backdrop-filter: blur(10px);
    border-radius: 16px;
    border: 1px solid rgba(255,255,255,0.2);
}
h1, h2, h3, p, label, span {
    color: #ffffff;
}
.chip {
    display: inline-block; padding: 0.2rem 0.7rem; margin: 0.15rem;
    border-radius: 999px; background: rgba(255,255,255,0.15); font-size: 0.9rem;
}
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a coroutine on this browser session's own event loop."""
    loop = st.session_state.get("_loop")
    if loop is None:
        loop = asyncio.new_event_loop()
        st.session_state["_loop"] = loop
    return loop.run_until_complete(coro)


def _session() -> SessionStore:
    session = st.session_state.get("_session")
    if session is None:
        settings = st.session_state["_settings"]
        store = get_store(settings)
        identity = LocalIdentitySession(store=store)
        session = SessionStore(identity, store)
        _run(session.start())
        st.session_state["_session"] = session
    return session


def _client() -> AnalysisClient:
    client = st.session_state.get("_client")
    if client is None:
        client = AnalysisClient.from_settings(st.session_state["_settings"])
        st.session_state["_client"] = client
    return client


def _show_warnings(session: SessionStore) -> None:
    for warning in session.pop_warnings():
        st.warning(warning)


# ── Page: Configuration Required ─────────────────────────────────────────


def page_not_configured(config: NotConfigured) -> None:
    st.header("Configuration Required")
    st.write("Welcome to the AI Job Dashboard!")
    st.write(
        "To get started, connect the app to an AI provider. "
        "Your résumé analysis and job history are saved per signed-in user."
    )
    if config.missing:
        st.error("Missing: " + ", ".join(f"`{key}`" for key in config.missing))
    elif config.reason:
        st.error(config.reason)
    st.markdown(
        "**Next steps**\n"
        "1. Copy `.env.example` to `.env`.\n"
        "2. Add your Groq API key ([get a free key here](https://console.groq.com/keys)).\n"
        "3. Restart the app."
    )


# ── Page: Login ──────────────────────────────────────────────────────────


def page_login(session: SessionStore) -> None:
    st.header("AI Job Dashboard")
    st.write("Your personal AI-powered job assistant. Log in to get started.")

    with st.form("login"):
        email = st.text_input("E-mail", placeholder="you@example.com")
        name = st.text_input("Display name", placeholder="Optional")
        submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)

    if submitted:
        with st.spinner("Signing in…"):
            user = _run(session.identity.sign_in(email, name))
            if user is not None:
                _run(session.settled())
        if user is None:
            st.error("Sign-in failed. Check the e-mail address and try again.")
        else:
            st.rerun()


# ── Page: Dashboard ──────────────────────────────────────────────────────


def page_dashboard() -> None:
    session = _session()
    st.header("Résumé Dashboard")
    st.write("Upload your résumé to get AI-powered insights and job suggestions.")
    _show_warnings(session)

    c_in, c_out = st.columns(2)
    with c_in:
        st.subheader("Your Résumé")
        uploaded = st.file_uploader(
            "Upload a résumé file",
            type=[s.lstrip(".") for s in SUPPORTED_SUFFIXES],
        )
        if uploaded is not None and st.session_state.get("_resume_name") != uploaded.name:
            try:
                st.session_state["resume_text"] = extract_bytes(uploaded.name, uploaded.getvalue())
                st.session_state["_resume_name"] = uploaded.name
            except (ValueError, OSError) as exc:
                st.error(f"Could not read {uploaded.name}: {exc}")

        st.text_area("…or paste your résumé text here", key="resume_text", height=320)

        if st.button("Analyze Résumé", type="primary", use_container_width=True):
            with st.spinner("Analyzing your résumé…"):
                result = _run(actions.analyze_resume(session, _client(), st.session_state.get("resume_text", "")))
            if not result.ok:
                st.error(result.message)

    with c_out:
        st.subheader("AI Analysis")
        analysis = session.resume_analysis
        if analysis is None:
            st.info("Your résumé analysis will appear here.")
            return

        st.markdown("**Potential Job Titles**")
        st.markdown(chips_html(analysis.job_titles), unsafe_allow_html=True)
        st.markdown("**Top Skills**")
        st.markdown(chips_html(analysis.skills), unsafe_allow_html=True)
        st.markdown("**Keywords**")
        st.markdown(chips_html(analysis.keywords), unsafe_allow_html=True)

        if st.button("Find Jobs on Top Sites", use_container_width=True):
            result = _run(actions.find_jobs(session))
            if result.value is None:
                st.error(result.message)
            else:
                st.session_state["job_links"] = result.value
                if result.message:
                    st.warning(result.message)

        for url in st.session_state.get("job_links", []):
            st.link_button(site_label(url), url, use_container_width=True)


# ── Page: Cover Letter ───────────────────────────────────────────────────


def page_cover_letter() -> None:
    session = _session()
    st.header("AI Cover Letter Generator")
    st.write("Create a tailored cover letter in seconds.")
    _show_warnings(session)

    ready = session.resume_analysis is not None
    if not ready:
        st.error(actions.NO_ANALYSIS_MSG)

    with st.form("cover_letter"):
        c1, c2 = st.columns(2)
        with c1:
            job_title = st.text_input("Job title", placeholder="e.g. Frontend Developer", disabled=not ready)
        with c2:
            company = st.text_input("Company name", placeholder="e.g. Google", disabled=not ready)
        generate = st.form_submit_button(
            "Generate Cover Letter", type="primary", use_container_width=True, disabled=not ready
        )

    if generate:
        with st.spinner("Generating…"):
            result = _run(actions.generate_cover_letter(session, _client(), job_title, company))
        if result.value is None:
            st.error(result.message)
        else:
            st.session_state["cover_letter"] = result.value
            if result.message:
                st.warning(result.message)

    letter = st.session_state.get("cover_letter")
    if letter:
        st.subheader("Your Generated Cover Letter")
        st.text_area("Cover letter", value=letter, height=400, label_visibility="collapsed")


# ── Page: History ────────────────────────────────────────────────────────


def page_history() -> None:
    session = _session()
    st.header("Job Application History")
    st.write("Keep track of your job search journey.")
    _show_warnings(session)

    if not session.job_history:
        st.info("No jobs in your history yet. Find jobs or generate a cover letter to get started.")
        return

    exported = actions.export_history(session)
    if exported.ok:
        st.download_button(
            "Export CSV", exported.value, file_name=EXPORT_FILENAME, mime="text/csv"
        )

    import pandas as pd

    df = pd.DataFrame([job.to_dict() for job in session.job_history])
    st.dataframe(
        df[["title", "company", "date", "link"]],
        use_container_width=True,
        column_config={"link": st.column_config.LinkColumn("Link")},
        hide_index=True,
    )

    st.subheader("Remove a job")
    for job in session.job_history:
        c1, c2 = st.columns([5, 1])
        c1.markdown(f"**{job.title}** — {job.company} · {job.date}")
        if c2.button("Delete", key=f"del_{job.id}"):
            result = _run(actions.delete_job(session, job.id))
            if not result.ok:
                st.error(result.message)
            else:
                st.rerun()


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_GLASS_CSS, unsafe_allow_html=True)


def _sidebar(session: SessionStore) -> None:
    with st.sidebar:
        user = session.current_user
        st.markdown(f"Signed in as **{user.display_name or user.email}**")
        if st.button("Logout", use_container_width=True):
            _run(session.identity.sign_out())
            _run(session.settled())
            for key in ("resume_text", "_resume_name", "job_links", "cover_letter"):
                st.session_state.pop(key, None)
            st.rerun()


def _wrap_dashboard():
    _inject_css()
    _sidebar(_session())
    page_dashboard()


def _wrap_cover_letter():
    _inject_css()
    _sidebar(_session())
    page_cover_letter()


def _wrap_history():
    _inject_css()
    _sidebar(_session())
    page_history()


def main() -> None:
    _inject_css()
    config = validate_config()
    if isinstance(config, NotConfigured):
        page_not_configured(config)
        return
    st.session_state["_settings"] = config.settings

    session = _session()
    if session.phase is Phase.LOADING:
        _run(session.settled())
    if session.current_user is None:
        page_login(session)
        return

    pages = [
        st.Page(_wrap_dashboard, title="Dashboard", icon="🚀", url_path="dashboard", default=True),
        st.Page(_wrap_cover_letter, title="Cover Letter", icon="✉️", url_path="cover-letter"),
        st.Page(_wrap_history, title="History", icon="📋", url_path="history"),
    ]
    nav = st.navigation(pages)
    nav.run()


main()
