"""Environment-driven settings for the dashboard."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_TEMPERATURE = 0.2


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    openai_model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    log_level: str = "INFO"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key.strip())


def _to_float(value: str | None, fallback: float) -> float:
    try:
        if value is None or not str(value).strip():
            return fallback
        return float(value)
    except ValueError:
        return fallback


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables (``os.environ`` by default)."""
    env = os.environ if environ is None else environ
    return Settings(
        openai_api_key=str(env.get("OPENAI_API_KEY", "")).strip(),
        openai_model=str(env.get("LEDGERLENS_MODEL", "")).strip() or DEFAULT_MODEL,
        temperature=_to_float(env.get("LEDGERLENS_TEMPERATURE"), DEFAULT_TEMPERATURE),
        log_level=str(env.get("LEDGERLENS_LOG_LEVEL", "")).strip().upper() or "INFO",
    )
