"""Environment-driven settings.

Values are read when `get_settings()` is first called, after `load_dotenv()`
has had a chance to populate the environment from a `.env` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    # OpenAI
    openai_api_key: Optional[str]
    openai_model: str
    openai_timeout_seconds: float
    openai_max_retries: int

    # Scan session
    history_limit: int
    max_upload_bytes: int
    max_sessions: int
    session_ttl_seconds: float

    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-5"),
            openai_timeout_seconds=_float_env("OPENAI_TIMEOUT_SECONDS", 60.0),
            openai_max_retries=_int_env("OPENAI_MAX_RETRIES", 1),
            history_limit=_int_env("SCAN_HISTORY_LIMIT", 10),
            max_upload_bytes=_int_env("MAX_UPLOAD_BYTES", 20 * 1024 * 1024),
            max_sessions=_int_env("MAX_SESSIONS", 500),
            session_ttl_seconds=_float_env("SESSION_TTL_SECONDS", 3600.0),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading `.env` on first use."""
    load_dotenv()
    return Settings.from_env()
