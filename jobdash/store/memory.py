"""In-process profile store for tests and for running without a data dir."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from jobdash.log import get_logger
from jobdash.models import Job, ResumeAnalysis, User
from jobdash.store.base import ProfileStore, order_history

log = get_logger(__name__)


class InMemoryProfileStore(ProfileStore):
    def __init__(self) -> None:
        self.profiles: dict[str, dict[str, str]] = {}
        self.analyses: dict[str, ResumeAnalysis] = {}
        self.jobs: dict[str, list[Job]] = {}

    async def ensure_profile(self, user: User) -> None:
        if user.uid in self.profiles:
            return
        self.profiles[user.uid] = {
            "name": user.display_name,
            "email": user.email,
            "joinDate": datetime.now(timezone.utc).isoformat(),
        }
        log.info("Created profile for %s", user.email)

    async def read_analysis(self, uid: str) -> ResumeAnalysis | None:
        stored = self.analyses.get(uid)
        return ResumeAnalysis.from_dict(stored.to_dict()) if stored else None

    async def write_analysis(self, uid: str, analysis: ResumeAnalysis) -> None:
        self.analyses[uid] = ResumeAnalysis.from_dict(analysis.to_dict())

    async def read_job_history(self, uid: str) -> list[Job]:
        return order_history(self.jobs.get(uid, []))

    async def append_job(self, uid: str, record: dict[str, str]) -> Job:
        job = Job.from_dict({**record, "id": uuid.uuid4().hex})
        self.jobs.setdefault(uid, []).append(job)
        log.debug("Stored job %s: %s @ %s", job.id, job.title, job.company)
        return job

    async def delete_job(self, uid: str, job_id: str) -> None:
        jobs = self.jobs.get(uid, [])
        self.jobs[uid] = [j for j in jobs if j.id != job_id]
