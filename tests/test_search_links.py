from __future__ import annotations

from jobdash.models import ResumeAnalysis
from jobdash.search_links import (
    GENERAL_SEARCH_TITLE,
    MULTI_SITE_COMPANY,
    company_careers_link,
    job_search_draft,
    job_site_urls,
)


def _analysis() -> ResumeAnalysis:
    return ResumeAnalysis(skills=["Go", "C++"], job_titles=["Backend Engineer"], keywords=["Go"])


def test_job_site_urls():
    assert job_site_urls(_analysis()) == [
        "https://www.linkedin.com/jobs/search/?keywords=Backend%20Engineer%20Go%20C%2B%2B",
        "https://www.indeed.com/jobs?q=Backend%20Engineer%20Go%20C%2B%2B",
        "https://www.naukri.com/backend-engineer-go-c++-jobs",
    ]


def test_job_search_draft():
    draft = job_search_draft(_analysis())
    assert draft.title == "Backend Engineer"
    assert draft.company == MULTI_SITE_COMPANY
    assert draft.link == "https://www.google.com/search?q=Backend%20Engineer%20Go%20C%2B%2B+jobs"


def test_job_search_draft_without_titles():
    draft = job_search_draft(ResumeAnalysis(skills=["Go"]))
    assert draft.title == GENERAL_SEARCH_TITLE


def test_company_careers_link():
    assert company_careers_link("Acme & Co") == "https://www.google.com/search?q=Acme%20%26%20Co%20careers"
