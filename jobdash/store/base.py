"""Profile store contract shared by the file and in-memory backends."""
from __future__ import annotations

from abc import ABC, abstractmethod

from jobdash.models import Job, ResumeAnalysis, User


class ProfileStore(ABC):
    """Per-user persistence of the latest analysis and the job history."""

    @abstractmethod
    async def ensure_profile(self, user: User) -> None:
        pass

    @abstractmethod
    async def read_analysis(self, uid: str) -> ResumeAnalysis | None:
        pass

    @abstractmethod
    async def write_analysis(self, uid: str, analysis: ResumeAnalysis) -> None:
        pass

    @abstractmethod
    async def read_job_history(self, uid: str) -> list[Job]:
        """All jobs for the user, newest date first."""
        pass

    @abstractmethod
    async def append_job(self, uid: str, record: dict[str, str]) -> Job:
        pass

    @abstractmethod
    async def delete_job(self, uid: str, job_id: str) -> None:
        """Idempotent: deleting an unknown id is not an error."""
        pass


def order_history(jobs: list[Job]) -> list[Job]:
    """Date descending; among equal dates the most recently appended first."""
    indexed = list(enumerate(jobs))
    indexed.sort(key=lambda pair: (pair[1].date, pair[0]), reverse=True)
    return [job for _, job in indexed]
