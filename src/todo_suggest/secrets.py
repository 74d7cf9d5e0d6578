"""
API key resolution: environment first, then AWS Secrets Manager.
"""

from __future__ import annotations

import importlib
import json
import logging

from .config import Settings

logger = logging.getLogger(__name__)

SECRET_KEY_FIELD = "GEMINI_API_KEY"


def _boto3():
    # Allow tests to monkeypatch module-level `boto3` symbol.
    return globals().get("boto3") or importlib.import_module("boto3")


def _from_secrets_manager(secret_id: str) -> str | None:
    client = _boto3().client("secretsmanager")
    resp = client.get_secret_value(SecretId=secret_id)
    raw = resp.get("SecretString") or ""
    # Secret may be stored as plain text or as {"GEMINI_API_KEY": "..."}
    try:
        data = json.loads(raw)
    except ValueError:
        return raw.strip() or None
    if isinstance(data, dict):
        val = data.get(SECRET_KEY_FIELD)
        return str(val) if val else None
    if isinstance(data, str):
        return data.strip() or None
    return None


def resolve_api_key(settings: Settings) -> str | None:
    """Return the Gemini API key, or None when it is not configured anywhere."""
    if settings.gemini_api_key:
        return settings.gemini_api_key
    if not settings.gemini_secret_name:
        return None
    try:
        return _from_secrets_manager(settings.gemini_secret_name)
    except Exception:
        logger.exception("Secrets Manager lookup failed: %s", settings.gemini_secret_name)
        return None
