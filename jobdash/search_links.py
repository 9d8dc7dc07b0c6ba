"""Pre-filled job-site search links built from a résumé analysis."""
from __future__ import annotations

import re
from urllib.parse import quote

from jobdash.models import JobDraft, ResumeAnalysis

MULTI_SITE_COMPANY = "Multiple Job Sites"
GENERAL_SEARCH_TITLE = "General Job Search"


def _encode(text: str) -> str:
    return quote(text, safe="")


def search_query(analysis: ResumeAnalysis) -> str:
    return " ".join([*analysis.job_titles, *analysis.skills])


def job_site_urls(analysis: ResumeAnalysis) -> list[str]:
    query = search_query(analysis)
    encoded = _encode(query)
    naukri = re.sub(r"\s+", "-", query.strip()).lower()
    return [
        f"https://www.linkedin.com/jobs/search/?keywords={encoded}",
        f"https://www.indeed.com/jobs?q={encoded}",
        f"https://www.naukri.com/{naukri}-jobs",
    ]


def job_search_draft(analysis: ResumeAnalysis) -> JobDraft:
    """History entry recorded when the user opens the job-site searches."""
    return JobDraft(
        title=analysis.job_titles[0] if analysis.job_titles else GENERAL_SEARCH_TITLE,
        company=MULTI_SITE_COMPANY,
        link=f"https://www.google.com/search?q={_encode(search_query(analysis))}+jobs",
    )


def company_careers_link(company_name: str) -> str:
    return f"https://www.google.com/search?q={_encode(company_name + ' careers')}"
