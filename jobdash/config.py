"""Load environment and settings; validate that the app can run."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml
from dotenv import load_dotenv

from jobdash.log import get_logger

log = get_logger(__name__)

load_dotenv()

PROJECT_ROOT: Path = Path.cwd()
CONFIG_DIR: Path = PROJECT_ROOT / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = PROJECT_ROOT / "data"

DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
REQUIRED_ENV: list[str] = ["GROQ_API_KEY"]


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    temperature: float = 0.7
    top_p: float = 0.95
    store_backend: str = "file"
    data_dir: Path = DATA_DIR

    @property
    def session_path(self) -> Path:
        return self.data_dir / "session.yaml"


@dataclass(frozen=True)
class Configured:
    settings: Settings


@dataclass(frozen=True)
class NotConfigured:
    missing: list[str] = field(default_factory=list)
    reason: str = ""


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def load_settings_file(path: Path | None = None) -> dict[str, Any]:
    path = path or SETTINGS_PATH
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping")
    return data


def validate_config(
    env_getter: Callable[[str], str] = get_env,
    settings_path: Path | None = None,
) -> Configured | NotConfigured:
    """Resolve settings from settings.yaml plus environment overrides."""
    missing = [key for key in REQUIRED_ENV if not env_getter(key)]
    if missing:
        log.warning("Missing configuration: %s", ", ".join(missing))
        return NotConfigured(missing=missing, reason="required environment variables are not set")

    try:
        data = load_settings_file(settings_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        log.error("Could not read settings: %s", exc)
        return NotConfigured(reason=f"settings file is invalid: {exc}")

    llm = data.get("llm") or {}
    store = data.get("store") or {}
    try:
        settings = Settings(
            api_key=env_getter("GROQ_API_KEY"),
            model=env_getter("GROQ_LLM_MODEL") or llm.get("model") or DEFAULT_MODEL,
            base_url=env_getter("LLM_BASE_URL") or llm.get("base_url") or DEFAULT_BASE_URL,
            temperature=float(llm.get("temperature", 0.7)),
            top_p=float(llm.get("top_p", 0.95)),
            store_backend=env_getter("JOBDASH_STORE") or store.get("backend") or "file",
            data_dir=Path(env_getter("JOBDASH_DATA_DIR") or store.get("data_dir") or DATA_DIR),
        )
    except (TypeError, ValueError) as exc:
        return NotConfigured(reason=f"settings file is invalid: {exc}")
    return Configured(settings)
