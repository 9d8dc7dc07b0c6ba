"""Error taxonomy shared by the session core and its collaborators."""
from __future__ import annotations


class JobDashError(Exception):
    """Base class for every error the dashboard expects to handle."""


class AuthFailure(JobDashError):
    """Interactive sign-in failed or was cancelled."""


class StoreError(JobDashError):
    """A profile store read or write failed."""


class AnalysisError(JobDashError):
    """The AI service could not produce a valid résumé analysis."""


class GenerationError(JobDashError):
    """The AI service could not produce a cover letter."""
