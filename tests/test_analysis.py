from __future__ import annotations

import asyncio
import json

import pytest
from openai import OpenAIError

from jobdash.analysis import AnalysisClient
from jobdash.errors import AnalysisError, GenerationError
from jobdash.models import ResumeAnalysis
from tests.conftest import FakeCompletions, fake_openai, go_analysis


def _client(completions: FakeCompletions) -> AnalysisClient:
    return AnalysisClient("test-key", model="test-model", client=fake_openai(completions))


def test_analyze_parses_required_fields():
    payload = {"skills": ["Go", "SQL"], "jobTitles": ["Backend Engineer"], "keywords": ["Go", "SQL", "gRPC"]}
    completions = FakeCompletions(content=json.dumps(payload))

    analysis = asyncio.run(_client(completions).analyze("Ten years of Go services."))

    assert analysis == ResumeAnalysis(
        skills=["Go", "SQL"], job_titles=["Backend Engineer"], keywords=["Go", "SQL", "gRPC"]
    )
    request = completions.requests[0]
    assert request["model"] == "test-model"
    assert request["response_format"] == {"type": "json_object"}
    assert "Ten years of Go services." in request["messages"][0]["content"]


@pytest.mark.parametrize(
    "content",
    [
        "not json at all",
        json.dumps({"skills": ["Go"], "keywords": ["Go"]}),
        json.dumps({"skills": "Go", "jobTitles": [], "keywords": []}),
        json.dumps(["Go"]),
        "",
        None,
    ],
)
def test_analyze_rejects_contract_violations(content):
    with pytest.raises(AnalysisError):
        asyncio.run(_client(FakeCompletions(content=content)).analyze("resume"))


def test_analyze_wraps_service_errors():
    completions = FakeCompletions(error=OpenAIError("connection refused"))
    with pytest.raises(AnalysisError) as excinfo:
        asyncio.run(_client(completions).analyze("resume"))
    assert "Failed to analyze resume" in str(excinfo.value)
    assert len(completions.requests) == 1


def test_analyze_requires_text():
    completions = FakeCompletions(content="{}")
    with pytest.raises(ValueError):
        asyncio.run(_client(completions).analyze("   "))
    assert completions.requests == []


def test_cover_letter_prompt_and_sampling():
    completions = FakeCompletions(content="  Dear Acme team,\n\nI build Go services.  ")

    letter = asyncio.run(_client(completions).generate_cover_letter("Backend Engineer", "Acme", go_analysis()))

    assert letter == "Dear Acme team,\n\nI build Go services."
    request = completions.requests[0]
    prompt = request["messages"][0]["content"]
    assert "'Backend Engineer'" in prompt
    assert "'Acme'" in prompt
    assert "key skills are: Go." in prompt
    assert request["temperature"] == 0.7
    assert request["top_p"] == 0.95


def test_cover_letter_errors():
    with pytest.raises(GenerationError):
        asyncio.run(
            _client(FakeCompletions(error=OpenAIError("503"))).generate_cover_letter("T", "C", go_analysis())
        )
    with pytest.raises(GenerationError):
        asyncio.run(_client(FakeCompletions(content="   ")).generate_cover_letter("T", "C", go_analysis()))
