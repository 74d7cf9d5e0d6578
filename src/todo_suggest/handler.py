"""
AWS Lambda handler for the to-do suggestion endpoint -> Gemini relay.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import time
from typing import Any

from . import prompts
from .config import RELAY_MODE_PASSTHROUGH, Settings, load_settings
from .errors import (
    InvalidRequestBody,
    MethodNotAllowed,
    MissingConfiguration,
    RelayError,
    UpstreamCallFailure,
)
from .gemini import GeminiClient, GeminiError
from .secrets import resolve_api_key

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level_name = (os.getenv("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
    root = logging.getLogger()
    if root.level and root.level > level:
        root.setLevel(level)


def _rid(context: Any) -> str | None:
    return getattr(context, "aws_request_id", None)


def _log(msg: str, **fields: Any) -> None:
    try:
        rec = {"msg": msg, **fields}
        logger.info(json.dumps(rec, ensure_ascii=False))
    except (TypeError, ValueError):
        # Fallback to plain log
        logger.info("%s | %s", msg, fields)


def _response(status: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, ensure_ascii=False),
    }


def _get_method(event: dict[str, Any]) -> str:
    # Function URL / HTTP API v2 first, then REST API v1
    http = (event.get("requestContext") or {}).get("http") or {}
    method = http.get("method") or event.get("httpMethod") or ""
    return str(method).upper()


def _get_body(event: dict[str, Any]) -> Any:
    """Parsed JSON body, or None when the request carries no body."""
    body = event.get("body")
    if isinstance(body, (dict, list)):
        return body
    try:
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body or b"")
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise InvalidRequestBody() from e
    if body is None or not str(body).strip():
        return None
    try:
        return json.loads(body)
    except (TypeError, ValueError) as e:
        raise InvalidRequestBody() from e


def _client(settings: Settings, api_key: str) -> GeminiClient:
    return GeminiClient(
        settings.gemini_api_base,
        api_key,
        settings.gemini_model,
        timeout=settings.gemini_timeout_seconds,
    )


def _suggest(client: GeminiClient, payload: Any, context: Any) -> dict[str, Any]:
    existing_tasks = prompts.existing_tasks_from(payload)
    user_query = prompts.build_user_query(existing_tasks)
    t0 = time.time()
    text = client.generate_text(prompts.build_generate_request(user_query))
    suggestion = text.strip()
    _log(
        "relay_ok",
        rid=_rid(context),
        mode="prompt",
        model=client.model,
        ms=int((time.time() - t0) * 1000),
        prompt_chars=len(user_query),
        out_chars=len(suggestion),
    )
    return {"suggestion": suggestion}


def _passthrough(client: GeminiClient, payload: Any, context: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidRequestBody()
    t0 = time.time()
    data = client.generate_content(payload)
    _log(
        "relay_ok",
        rid=_rid(context),
        mode="passthrough",
        model=client.model,
        ms=int((time.time() - t0) * 1000),
    )
    return data


def _handle(event: dict[str, Any], context: Any) -> dict[str, Any]:
    # 1) Method
    method = _get_method(event)
    if method != "POST":
        _log("method_not_allowed", rid=_rid(context), method=method)
        raise MethodNotAllowed()

    # 2) Credential
    settings = load_settings()
    api_key = resolve_api_key(settings)
    if not api_key:
        _log("config_error_missing_api_key", rid=_rid(context))
        raise MissingConfiguration()

    # 3) Body
    try:
        payload = _get_body(event)
    except InvalidRequestBody:
        _log("invalid_json_body", rid=_rid(context))
        raise

    # 4) Relay
    client = _client(settings, api_key)
    try:
        if settings.relay_mode == RELAY_MODE_PASSTHROUGH:
            return _passthrough(client, payload, context)
        return _suggest(client, payload, context)
    except GeminiError as e:
        logger.error("Gemini API Error: %s", e)
        _log(
            "gemini_error",
            rid=_rid(context),
            model=settings.gemini_model,
            upstream_status=e.status,
            error=str(e),
        )
        raise UpstreamCallFailure(str(e)) from e


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    _configure_logging()
    try:
        return _response(200, _handle(event or {}, context))
    except RelayError as e:
        return _response(e.status, e.body())
