"""
Minimal Gemini REST client (generateContent) using stdlib urllib.
"""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

UNEXPECTED_SHAPE = "Gemini returned an unexpected response shape"


class GeminiError(Exception):
    """Upstream call failed; the message is what the API (or network) reported."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class GeminiClient:
    def __init__(self, api_base: str, api_key: str, model: str, timeout: int = 30) -> None:
        self.api_base = api_base.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    # ----- Helpers -----
    def _url(self, method: str) -> str:
        path = f"/models/{urllib.parse.quote(self.model)}:{method}"
        return self.api_base + path + "?" + urllib.parse.urlencode({"key": self.api_key})

    def _post_json(self, url: str, payload: dict[str, Any]) -> Any:
        req = urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "User-Agent": "TodoSuggest/1.0",
                "Content-Type": "application/json",
            },
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                data = resp.read()
        except urllib.error.HTTPError as e:
            raise GeminiError(_http_error_message(e), status=e.code) from e
        except urllib.error.URLError as e:
            raise GeminiError(f"Gemini request failed: {e.reason}") from e
        except TimeoutError as e:
            raise GeminiError("Gemini request timed out") from e
        except (OSError, http.client.HTTPException) as e:
            # Connection reset or truncated body while reading the reply
            raise GeminiError(f"Gemini request failed: {str(e) or type(e).__name__}") from e
        try:
            return json.loads(data.decode("utf-8"))
        except ValueError as e:
            raise GeminiError("Gemini returned a non-JSON response") from e

    # ----- Public APIs -----
    def generate_content(self, payload: dict[str, Any]) -> dict[str, Any]:
        data = self._post_json(self._url("generateContent"), payload)
        if not isinstance(data, dict):
            raise GeminiError(UNEXPECTED_SHAPE)
        return data

    def generate_text(self, payload: dict[str, Any]) -> str:
        return response_text(self.generate_content(payload))


def response_text(data: dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list):
        raise GeminiError(UNEXPECTED_SHAPE)
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        if not isinstance(feedback, dict):
            raise GeminiError(UNEXPECTED_SHAPE)
        reason = feedback.get("blockReason")
        if reason:
            raise GeminiError(f"Prompt was blocked: {reason}")
        raise GeminiError("Gemini response contained no candidates")
    first = candidates[0] or {}
    if not isinstance(first, dict):
        raise GeminiError(UNEXPECTED_SHAPE)
    content = first.get("content") or {}
    if not isinstance(content, dict):
        raise GeminiError(UNEXPECTED_SHAPE)
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise GeminiError(UNEXPECTED_SHAPE)
    texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
    if not texts:
        finish = first.get("finishReason")
        suffix = f" (finishReason={finish})" if finish else ""
        raise GeminiError("Gemini response contained no text" + suffix)
    return "".join(texts)


def _http_error_message(e: urllib.error.HTTPError) -> str:
    # Google APIs answer errors as {"error": {"code", "message", "status"}}
    try:
        body = json.loads(e.read().decode("utf-8"))
        msg = (body.get("error") or {}).get("message")
        if msg:
            return str(msg)
    except Exception:
        pass
    return f"HTTP {e.code}: {e.reason}"
