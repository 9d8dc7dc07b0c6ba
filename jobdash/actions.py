"""User actions shared by the Streamlit pages and the CLI.

Each action guards its inputs, calls the session core and the analysis
client, and turns every expected failure into a message for the user.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jobdash.analysis import AnalysisClient
from jobdash.errors import AnalysisError, GenerationError, StoreError
from jobdash.export import history_to_csv
from jobdash.log import get_logger
from jobdash.models import JobDraft
from jobdash.search_links import company_careers_link, job_search_draft, job_site_urls
from jobdash.session import SessionStore

log = get_logger(__name__)

NO_RESUME_MSG = "Please upload or paste a resume first."
NO_ANALYSIS_MSG = "Please analyze your résumé on the Dashboard page first."
MISSING_JOB_FIELDS_MSG = "Please provide both a job title and a company name."
SAVE_FAILED_MSG = "Your changes could not be saved. Please try again."


@dataclass
class ActionResult:
    ok: bool
    message: str = ""
    value: Any = None


def _failed(message: str) -> ActionResult:
    return ActionResult(ok=False, message=message)


async def analyze_resume(session: SessionStore, client: AnalysisClient, resume_text: str) -> ActionResult:
    if not resume_text or not resume_text.strip():
        return _failed(NO_RESUME_MSG)

    try:
        analysis = await client.analyze(resume_text)
    except AnalysisError as exc:
        await session.set_resume_analysis(None)
        return _failed(str(exc))

    try:
        await session.set_resume_analysis(analysis)
    except StoreError as exc:
        log.error("Saving analysis failed: %s", exc)
        return ActionResult(ok=False, message=SAVE_FAILED_MSG, value=analysis)
    return ActionResult(ok=True, value=analysis)


async def find_jobs(session: SessionStore) -> ActionResult:
    """Search URLs for the current analysis; records the search in the history."""
    analysis = session.resume_analysis
    if analysis is None:
        return _failed(NO_ANALYSIS_MSG)

    urls = job_site_urls(analysis)
    try:
        await session.add_job_to_history(job_search_draft(analysis))
    except StoreError as exc:
        log.error("Recording job search failed: %s", exc)
        return ActionResult(ok=True, message=SAVE_FAILED_MSG, value=urls)
    return ActionResult(ok=True, value=urls)


async def generate_cover_letter(
    session: SessionStore,
    client: AnalysisClient,
    job_title: str,
    company_name: str,
) -> ActionResult:
    analysis = session.resume_analysis
    if analysis is None:
        return _failed(NO_ANALYSIS_MSG)
    job_title, company_name = (job_title or "").strip(), (company_name or "").strip()
    if not job_title or not company_name:
        return _failed(MISSING_JOB_FIELDS_MSG)

    try:
        letter = await client.generate_cover_letter(job_title, company_name, analysis)
    except GenerationError as exc:
        return _failed(str(exc))

    draft = JobDraft(title=job_title, company=company_name, link=company_careers_link(company_name))
    try:
        await session.add_job_to_history(draft)
    except StoreError as exc:
        log.error("Recording %s @ %s failed: %s", job_title, company_name, exc)
        return ActionResult(ok=True, message=SAVE_FAILED_MSG, value=letter)
    return ActionResult(ok=True, value=letter)


async def delete_job(session: SessionStore, job_id: str) -> ActionResult:
    try:
        await session.delete_job_from_history(job_id)
    except StoreError as exc:
        log.error("Deleting job %s failed: %s", job_id, exc)
        return _failed(SAVE_FAILED_MSG)
    return ActionResult(ok=True)


def export_history(session: SessionStore) -> ActionResult:
    content = history_to_csv(session.job_history)
    if content is None:
        return _failed("No jobs in your history yet.")
    return ActionResult(ok=True, value=content)
