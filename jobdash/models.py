"""Data models for users, résumé analyses and tracked jobs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_ANALYSIS_FIELDS: dict[str, str] = {
    "skills": "skills",
    "jobTitles": "job_titles",
    "keywords": "keywords",
}

JOB_FIELDS: list[str] = ["id", "title", "company", "link", "date"]


@dataclass(frozen=True)
class User:
    uid: str
    email: str
    display_name: str = ""


@dataclass
class ResumeAnalysis:
    skills: list[str] = field(default_factory=list)
    job_titles: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResumeAnalysis:
        """Build from the camelCase wire form; every field is required."""
        if not isinstance(data, dict):
            raise ValueError("analysis must be a JSON object")
        values: dict[str, list[str]] = {}
        for wire_name, attr in _ANALYSIS_FIELDS.items():
            if wire_name not in data:
                raise ValueError(f"missing required field '{wire_name}'")
            items = data[wire_name]
            if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
                raise ValueError(f"field '{wire_name}' must be a list of strings")
            values[attr] = list(items)
        return cls(**values)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "skills": list(self.skills),
            "jobTitles": list(self.job_titles),
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True)
class JobDraft:
    """A job the user visited, before the store assigns id and date."""

    title: str
    company: str
    link: str

    def stamp(self, date: str) -> dict[str, str]:
        return {"title": self.title, "company": self.company, "link": self.link, "date": date}


@dataclass(frozen=True)
class Job:
    id: str
    title: str
    company: str
    link: str
    date: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Job:
        return cls(**{k: str(data.get(k, "")) for k in JOB_FIELDS})

    def to_dict(self) -> dict[str, str]:
        return {k: getattr(self, k) for k in JOB_FIELDS}

    def same_posting(self, draft: JobDraft) -> bool:
        return self.title == draft.title and self.company == draft.company
