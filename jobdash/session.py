"""Session-synchronized store.

Owns the in-memory view of the signed-in user, their latest résumé analysis
and their job history. Identity changes reload or clear that view from the
profile store; mutations write through to the store before memory changes.

Everything runs on one event loop, so no locks are needed: the only
concurrency is between awaits.
"""
from __future__ import annotations

import asyncio
from datetime import date
from enum import Enum
from typing import Any, Callable

from jobdash.errors import StoreError
from jobdash.identity import IdentitySession
from jobdash.log import get_logger
from jobdash.models import Job, JobDraft, ResumeAnalysis, User
from jobdash.store.base import ProfileStore

log = get_logger(__name__)

Listener = Callable[["SessionStore"], None]


class Phase(Enum):
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionStore:
    def __init__(
        self,
        identity: IdentitySession,
        store: ProfileStore,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.identity = identity
        self.store = store
        self._today = today

        self._phase = Phase.LOADING
        self._user: User | None = None
        self._analysis: ResumeAnalysis | None = None
        self._history: list[Job] = []
        self._warnings: list[str] = []

        # Bumped on every identity notification; loads from older ones are dropped.
        self._generation = 0
        self._pending: asyncio.Task | None = None
        self._adding: set[tuple[str, str]] = set()
        self._listeners: list[Listener] = []
        self._unsubscribe: Callable[[], None] | None = None

    # ── Read-only state ──────────────────────────────────────────────────

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def current_user(self) -> User | None:
        return self._user

    @property
    def resume_analysis(self) -> ResumeAnalysis | None:
        return self._analysis

    @property
    def job_history(self) -> tuple[Job, ...]:
        return tuple(self._history)

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(self._warnings)

    def pop_warnings(self) -> list[str]:
        drained, self._warnings = self._warnings, []
        return drained

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Subscribe to identity changes and wait for the first one to settle."""
        if self._unsubscribe is None:
            self._unsubscribe = self.identity.subscribe(self._on_identity_change)
        await self.settled()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def settled(self) -> None:
        """Wait for the current identity transition, including its load, to finish."""
        # Identity providers deliver with call_soon; let those run first.
        await asyncio.sleep(0)
        while self._pending is not None and not self._pending.done():
            await self._pending
        if self._pending is not None:
            self._pending.result()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ── Identity transitions ─────────────────────────────────────────────

    def _on_identity_change(self, user: User | None) -> None:
        self._generation += 1
        generation = self._generation

        if user is None:
            self._user = None
            self._analysis = None
            self._history = []
            self._pending = None
            self._phase = Phase.ANONYMOUS
            log.info("Session cleared")
            self._notify()
            return

        previous = self._user
        self._user = user
        self._phase = Phase.LOADING
        if previous is None or previous.uid != user.uid:
            self._analysis = None
            self._history = []
        log.info("Loading session for %s", user.email)
        self._notify()
        self._pending = asyncio.get_running_loop().create_task(self._load(user, generation))

    async def _load(self, user: User, generation: int) -> None:
        analysis_result, history_result = await asyncio.gather(
            self.store.read_analysis(user.uid),
            self.store.read_job_history(user.uid),
            return_exceptions=True,
        )
        if generation != self._generation:
            log.debug("Discarding stale session load for %s", user.email)
            return

        analysis = self._loaded(analysis_result, None, "résumé analysis")
        history = self._loaded(history_result, [], "job history")

        self._analysis = analysis
        self._history = list(history)
        self._phase = Phase.AUTHENTICATED
        log.info("Session ready for %s (%d jobs in history)", user.email, len(self._history))
        self._notify()

    def _loaded(self, result: Any, fallback: Any, what: str) -> Any:
        if isinstance(result, StoreError):
            log.warning("Could not load %s: %s", what, result)
            self._warnings.append(f"Could not load your saved {what}. Showing an empty view for now.")
            return fallback
        if isinstance(result, BaseException):
            raise result
        return result

    async def _wait_for_load(self) -> None:
        # A load settling after a mutation would overwrite it.
        if self._phase is Phase.LOADING:
            await self.settled()

    def _still_signed_in(self, user: User) -> bool:
        return self._user is not None and self._user.uid == user.uid

    # ── Mutations ────────────────────────────────────────────────────────

    async def set_resume_analysis(self, analysis: ResumeAnalysis | None) -> None:
        """Save and show ``analysis``; ``None`` only clears the local copy."""
        await self._wait_for_load()
        user = self._user
        if user is not None and analysis is not None:
            await self.store.write_analysis(user.uid, analysis)
            if not self._still_signed_in(user):
                log.debug("Identity changed during save; leaving memory alone")
                return
        self._analysis = analysis
        self._notify()

    async def add_job_to_history(self, draft: JobDraft) -> Job | None:
        await self._wait_for_load()
        user = self._user
        if user is None:
            return None

        record = draft.stamp(self._today().isoformat())
        key = (draft.title, draft.company)
        if key in self._adding or any(j.same_posting(draft) for j in self._history):
            log.debug("Skipping duplicate job: %s @ %s", draft.title, draft.company)
            return None

        self._adding.add(key)
        try:
            job = await self.store.append_job(user.uid, record)
        finally:
            self._adding.discard(key)

        if self._still_signed_in(user):
            self._history = [job, *self._history]
            self._notify()
        return job

    async def delete_job_from_history(self, job_id: str) -> None:
        await self._wait_for_load()
        user = self._user
        if user is None:
            return
        await self.store.delete_job(user.uid, job_id)
        if not self._still_signed_in(user):
            return
        self._history = [j for j in self._history if j.id != job_id]
        self._notify()
