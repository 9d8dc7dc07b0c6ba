"""Profile store on the local filesystem: JSON documents and a CSV job log."""
from __future__ import annotations

import asyncio
import csv
import fcntl
import json
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path

from jobdash.errors import StoreError
from jobdash.log import get_logger
from jobdash.models import JOB_FIELDS, Job, ResumeAnalysis, User
from jobdash.store.base import ProfileStore, order_history

log = get_logger(__name__)


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class FileProfileStore(ProfileStore):
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    # ── Layout ───────────────────────────────────────────────────────────

    def _user_dir(self, uid: str) -> Path:
        return self.root / "users" / uid

    def _profile_path(self, uid: str) -> Path:
        return self._user_dir(uid) / "profile.json"

    def _analysis_path(self, uid: str) -> Path:
        return self._user_dir(uid) / "resume_analysis" / "latest.json"

    def _history_path(self, uid: str) -> Path:
        return self._user_dir(uid) / "job_history.csv"

    # ── Blocking helpers ─────────────────────────────────────────────────

    def _ensure_profile(self, user: User) -> None:
        path = self._profile_path(user.uid)
        if path.exists():
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = {
            "name": user.display_name,
            "email": user.email,
            "joinDate": datetime.now(timezone.utc).isoformat(),
        }
        path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        log.info("Created profile → %s", path)

    def _read_analysis(self, uid: str) -> ResumeAnalysis | None:
        path = self._analysis_path(uid)
        if not path.exists():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        return ResumeAnalysis.from_dict(data)

    def _write_analysis(self, uid: str, analysis: ResumeAnalysis) -> None:
        path = self._analysis_path(uid)
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = {**analysis.to_dict(), "updatedAt": datetime.now(timezone.utc).isoformat()}
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        tmp.replace(path)

    def _read_rows(self, uid: str) -> list[dict[str, str]]:
        path = self._history_path(uid)
        if not path.exists():
            return []
        with open(path, "r", newline="", encoding="utf-8") as f:
            _lock(f, exclusive=False)
            rows = list(csv.DictReader(f))
            _unlock(f)
        return rows

    def _read_job_history(self, uid: str) -> list[Job]:
        return order_history([Job.from_dict(r) for r in self._read_rows(uid)])

    def _append_job(self, uid: str, record: dict[str, str]) -> Job:
        job = Job.from_dict({**record, "id": uuid.uuid4().hex})
        path = self._history_path(uid)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", newline="", encoding="utf-8") as f:
            _lock(f)
            w = csv.DictWriter(f, fieldnames=JOB_FIELDS)
            # Missing or empty file: the header goes first.
            if f.seek(0, os.SEEK_END) == 0:
                w.writeheader()
            w.writerow(job.to_dict())
            _unlock(f)
        log.debug("Tracked: %s @ %s [%s]", job.title, job.company, job.id)
        return job

    def _delete_job(self, uid: str, job_id: str) -> None:
        rows = self._read_rows(uid)
        kept = [r for r in rows if r.get("id") != job_id]
        if len(kept) == len(rows):
            return
        with open(self._history_path(uid), "w", newline="", encoding="utf-8") as f:
            _lock(f)
            w = csv.DictWriter(f, fieldnames=JOB_FIELDS)
            w.writeheader()
            w.writerows(kept)
            _unlock(f)
        log.debug("Deleted job %s", job_id)

    async def _run(self, what: str, fn, *args):
        try:
            return await asyncio.to_thread(fn, *args)
        except (OSError, ValueError, csv.Error) as exc:
            raise StoreError(f"{what} failed: {exc}") from exc

    # ── ProfileStore ─────────────────────────────────────────────────────

    async def ensure_profile(self, user: User) -> None:
        await self._run("ensure_profile", self._ensure_profile, user)

    async def read_analysis(self, uid: str) -> ResumeAnalysis | None:
        return await self._run("read_analysis", self._read_analysis, uid)

    async def write_analysis(self, uid: str, analysis: ResumeAnalysis) -> None:
        await self._run("write_analysis", self._write_analysis, uid, analysis)

    async def read_job_history(self, uid: str) -> list[Job]:
        return await self._run("read_job_history", self._read_job_history, uid)

    async def append_job(self, uid: str, record: dict[str, str]) -> Job:
        return await self._run("append_job", self._append_job, uid, record)

    async def delete_job(self, uid: str, job_id: str) -> None:
        await self._run("delete_job", self._delete_job, uid, job_id)
