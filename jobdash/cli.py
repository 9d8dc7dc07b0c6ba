"""
Command-line front end for the job dashboard.

Usage:
    python -m jobdash login you@example.com --name "Your Name"
    python -m jobdash analyze resume.pdf
    python -m jobdash find-jobs
    python -m jobdash cover-letter --title "Backend Engineer" --company Acme
    python -m jobdash history
    python -m jobdash delete <job-id>
    python -m jobdash export --output job_history.csv
    python -m jobdash logout
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from jobdash import actions
from jobdash.analysis import AnalysisClient
from jobdash.config import Configured, Settings, validate_config
from jobdash.export import EXPORT_FILENAME
from jobdash.identity import LocalIdentitySession
from jobdash.log import get_logger
from jobdash.resume_text import extract_text
from jobdash.session import SessionStore
from jobdash.store import get_store

log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobdash",
        description="AI job dashboard: résumé analysis, cover letters and job history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command")

    login = sub.add_parser("login", help="Sign in with an e-mail address")
    login.add_argument("email")
    login.add_argument("--name", default="", help="Display name")

    sub.add_parser("logout", help="Sign out")
    sub.add_parser("whoami", help="Show the signed-in user")

    analyze = sub.add_parser("analyze", help="Analyze a résumé file ('-' reads stdin)")
    analyze.add_argument("file")

    sub.add_parser("show", help="Show the saved résumé analysis")
    sub.add_parser("find-jobs", help="Print job-site search links for the analysis")

    letter = sub.add_parser("cover-letter", help="Generate a cover letter")
    letter.add_argument("--title", required=True)
    letter.add_argument("--company", required=True)

    sub.add_parser("history", help="List the job history")

    delete = sub.add_parser("delete", help="Delete a job from the history")
    delete.add_argument("job_id")

    export = sub.add_parser("export", help="Export the job history as CSV")
    export.add_argument("--output", "-o", default=EXPORT_FILENAME)
    return parser


def _read_resume(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return extract_text(Path(source))


def _print_analysis(session: SessionStore) -> None:
    analysis = session.resume_analysis
    if analysis is None:
        print("No résumé analysis yet. Run: jobdash analyze <file>")
        return
    print("Potential job titles: " + ", ".join(analysis.job_titles))
    print("Top skills:           " + ", ".join(analysis.skills))
    print("Keywords:             " + ", ".join(analysis.keywords))


def _print_history(session: SessionStore) -> None:
    if not session.job_history:
        print("No jobs in your history yet.")
        return
    for job in session.job_history:
        print(f"{job.id}  {job.date}  {job.title} @ {job.company}  {job.link}")


async def run_command(args: argparse.Namespace, settings: Settings) -> int:
    store = get_store(settings)
    identity = LocalIdentitySession(settings.session_path, store=store)
    session = SessionStore(identity, store)
    await session.start()
    try:
        return await _dispatch(args, settings, identity, session)
    finally:
        for warning in session.pop_warnings():
            print(f"Warning: {warning}", file=sys.stderr)
        session.close()


async def _dispatch(
    args: argparse.Namespace,
    settings: Settings,
    identity: LocalIdentitySession,
    session: SessionStore,
) -> int:
    if args.command == "login":
        user = await identity.sign_in(args.email, args.name)
        if user is None:
            print("Sign-in failed. Check the e-mail address and try again.", file=sys.stderr)
            return 1
        await session.settled()
        print(f"Signed in as {user.email}")
        return 0

    if session.current_user is None:
        print("Not signed in. Run: jobdash login <email>", file=sys.stderr)
        return 1

    if args.command == "logout":
        await identity.sign_out()
        await session.settled()
        print("Signed out.")
        return 0

    if args.command == "whoami":
        user = session.current_user
        print(f"{user.email} ({user.display_name or 'no name'}), {len(session.job_history)} job(s) tracked")
        return 0

    if args.command == "show":
        _print_analysis(session)
        return 0

    if args.command == "history":
        _print_history(session)
        return 0

    if args.command == "delete":
        result = await actions.delete_job(session, args.job_id)
        if not result.ok:
            print(result.message, file=sys.stderr)
            return 1
        print(f"Deleted {args.job_id}")
        return 0

    if args.command == "export":
        result = actions.export_history(session)
        if not result.ok:
            print(result.message, file=sys.stderr)
            return 1
        Path(args.output).write_text(result.value, encoding="utf-8")
        print(f"Exported {len(session.job_history)} job(s) → {args.output}")
        return 0

    if args.command == "find-jobs":
        result = await actions.find_jobs(session)
        if result.value is None:
            print(result.message, file=sys.stderr)
            return 1
        for url in result.value:
            print(url)
        if result.message:
            print(result.message, file=sys.stderr)
        return 0

    client = AnalysisClient.from_settings(settings)

    if args.command == "analyze":
        try:
            text = _read_resume(args.file)
        except (OSError, ValueError) as exc:
            print(f"Could not read résumé: {exc}", file=sys.stderr)
            return 1
        result = await actions.analyze_resume(session, client, text)
        if not result.ok:
            print(result.message, file=sys.stderr)
            return 1
        _print_analysis(session)
        return 0

    if args.command == "cover-letter":
        result = await actions.generate_cover_letter(session, client, args.title, args.company)
        if result.value is None:
            print(result.message, file=sys.stderr)
            return 1
        print(result.value)
        if result.message:
            print(result.message, file=sys.stderr)
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    config = validate_config()
    if not isinstance(config, Configured):
        missing = ", ".join(config.missing) or config.reason
        print(f"Configuration required: {missing}. See .env.example.", file=sys.stderr)
        return 1

    return asyncio.run(run_command(args, config.settings))
