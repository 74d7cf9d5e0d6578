"""
Configuration helpers and defaults.

Centralize tunables to avoid magic numbers in code/tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

RELAY_MODE_PROMPT = "prompt"
RELAY_MODE_PASSTHROUGH = "passthrough"


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v is not None else default


def _env_int(name: str, default: int) -> int:
    raw = (_env(name) or "").strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None
    gemini_secret_name: str | None
    gemini_model: str
    gemini_api_base: str
    gemini_timeout_seconds: int
    relay_mode: str


def load_settings() -> Settings:
    """Load settings from environment with safe defaults for local tests."""

    mode = (_env("RELAY_MODE", RELAY_MODE_PROMPT) or RELAY_MODE_PROMPT).strip().lower()
    if mode not in (RELAY_MODE_PROMPT, RELAY_MODE_PASSTHROUGH):
        mode = RELAY_MODE_PROMPT

    return Settings(
        # Empty string counts as unset, same as a missing variable
        gemini_api_key=_env("GEMINI_API_KEY") or None,
        gemini_secret_name=_env("GEMINI_API_KEY_SECRET_NAME") or None,
        gemini_model=_env("GEMINI_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL,
        gemini_api_base=_env("GEMINI_API_BASE", DEFAULT_API_BASE) or DEFAULT_API_BASE,
        gemini_timeout_seconds=_env_int("GEMINI_TIMEOUT_SECONDS", 30),
        relay_mode=mode,
    )
