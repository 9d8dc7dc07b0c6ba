"""Résumé analysis and cover-letter generation over an OpenAI-compatible API."""
from __future__ import annotations

import json

from openai import AsyncOpenAI, OpenAIError

from jobdash.config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings
from jobdash.errors import AnalysisError, GenerationError
from jobdash.log import get_logger
from jobdash.models import ResumeAnalysis

log = get_logger(__name__)

_ANALYZE_PROMPT = """\
Analyze the following resume text and extract the top 5 skills, 3 potential job titles,
and 10 relevant keywords. Focus on technical skills and professional roles.
Return ONLY a JSON object with exactly these keys, all required:

{{
  "skills": ["the 5 most prominent skills"],
  "jobTitles": ["3 potential job titles suitable for the candidate"],
  "keywords": ["10 relevant keywords and technologies found in the resume"]
}}

Resume: {resume_text}
"""

_COVER_LETTER_PROMPT = (
    "Write a professional and compelling cover letter for a candidate applying for the "
    "'{job_title}' position at '{company_name}'. The candidate's key skills are: {skills}. "
    "The letter should be enthusiastic, concise, and tailored to the role. "
    'Do not include placeholders like "[Your Name]" or "[Date]".'
)


class AnalysisClient:
    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.7,
        top_p: float = 0.95,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)

    @classmethod
    def from_settings(cls, settings: Settings) -> AnalysisClient:
        return cls(
            settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
            temperature=settings.temperature,
            top_p=settings.top_p,
        )

    async def analyze(self, resume_text: str) -> ResumeAnalysis:
        """One attempt; raises AnalysisError on any service or contract failure."""
        if not resume_text or not resume_text.strip():
            raise ValueError("resume text must not be empty")
        try:
            r = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": _ANALYZE_PROMPT.format(resume_text=resume_text)}],
                response_format={"type": "json_object"},
                temperature=0.1,
            )
            raw = (r.choices[0].message.content or "").strip()
            analysis = ResumeAnalysis.from_dict(json.loads(raw))
        except (OpenAIError, ValueError, IndexError) as exc:
            log.error("Error analyzing resume: %s", exc)
            raise AnalysisError(
                "Failed to analyze resume. The AI service might be unavailable or the response was invalid."
            ) from exc
        log.info(
            "Resume analyzed: %d skills, %d titles, %d keywords",
            len(analysis.skills), len(analysis.job_titles), len(analysis.keywords),
        )
        return analysis

    async def generate_cover_letter(self, job_title: str, company_name: str, analysis: ResumeAnalysis) -> str:
        prompt = _COVER_LETTER_PROMPT.format(
            job_title=job_title,
            company_name=company_name,
            skills=", ".join(analysis.skills),
        )
        try:
            r = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                top_p=self.top_p,
            )
            letter = (r.choices[0].message.content or "").strip()
        except (OpenAIError, IndexError) as exc:
            log.error("Error generating cover letter: %s", exc)
            raise GenerationError("Failed to generate cover letter. Please try again.") from exc
        if not letter:
            log.error("Cover letter for %s @ %s came back empty", job_title, company_name)
            raise GenerationError("Failed to generate cover letter. Please try again.")
        log.info("Cover letter generated for %s @ %s", job_title, company_name)
        return letter
