from __future__ import annotations

import asyncio
from datetime import date
from types import SimpleNamespace

import pytest

from jobdash.errors import StoreError
from jobdash.identity import IdentitySession
from jobdash.models import ResumeAnalysis, User
from jobdash.store.memory import InMemoryProfileStore

TODAY = date(2026, 10, 19)

ALICE = User(uid="alice-uid", email="alice@example.com", display_name="Alice")
BOB = User(uid="bob-uid", email="bob@example.com", display_name="Bob")


def fixed_today() -> date:
    return TODAY


def go_analysis() -> ResumeAnalysis:
    return ResumeAnalysis(skills=["Go"], job_titles=["Backend Engineer"], keywords=["Go", "SQL"])


class FakeIdentity(IdentitySession):
    """Identity provider whose transitions the test fires by hand."""

    def __init__(self, user: User | None = None) -> None:
        super().__init__()
        self._user = user

    @property
    def current_user(self) -> User | None:
        return self._user

    def emit(self, user: User | None) -> None:
        self._user = user
        for callback in list(self._subscribers):
            callback(user)

    async def sign_in(self, email: str, display_name: str = "") -> User | None:
        self._user = User(uid=email, email=email, display_name=display_name)
        self._notify_soon(self._user)
        return self._user

    async def sign_out(self) -> None:
        self._user = None
        self._notify_soon(None)


class RecordingStore(InMemoryProfileStore):
    """Memory store that records every call and can fail or block on demand."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str]] = []
        self.failing: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}

    async def _enter(self, op: str, uid: str) -> None:
        self.calls.append((op, uid))
        gate = self.gates.get(uid)
        if gate is not None:
            await gate.wait()
        if op in self.failing:
            raise StoreError(f"{op} unavailable")

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    async def read_analysis(self, uid):
        await self._enter("read_analysis", uid)
        return await super().read_analysis(uid)

    async def write_analysis(self, uid, analysis):
        await self._enter("write_analysis", uid)
        await super().write_analysis(uid, analysis)

    async def read_job_history(self, uid):
        await self._enter("read_job_history", uid)
        return await super().read_job_history(uid)

    async def append_job(self, uid, record):
        await self._enter("append_job", uid)
        return await super().append_job(uid, record)

    async def delete_job(self, uid, job_id):
        await self._enter("delete_job", uid)
        await super().delete_job(uid, job_id)


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``."""

    def __init__(self, content: str | None = "", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_openai(completions: FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


class FakeAnalysisClient:
    def __init__(self, analysis: ResumeAnalysis | None = None, letter: str = "Dear Hiring Team, ...",
                 error: Exception | None = None) -> None:
        self.analysis = analysis or go_analysis()
        self.letter = letter
        self.error = error
        self.analyze_calls: list[str] = []
        self.letter_calls: list[tuple[str, str, ResumeAnalysis]] = []

    async def analyze(self, resume_text: str) -> ResumeAnalysis:
        self.analyze_calls.append(resume_text)
        if self.error is not None:
            raise self.error
        return self.analysis

    async def generate_cover_letter(self, job_title, company_name, analysis) -> str:
        self.letter_calls.append((job_title, company_name, analysis))
        if self.error is not None:
            raise self.error
        return self.letter


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()
