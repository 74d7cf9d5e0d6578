import json

import pytest

import todo_suggest.handler as h
from todo_suggest import gemini
from todo_suggest.gemini import GeminiError


class FailingGemini:
    def __init__(self, *_a, **_k):
        self.model = "gemini-2.5-flash"

    def generate_text(self, payload):
        raise GeminiError("API key not valid. Please pass a valid API key.", status=400)

    def generate_content(self, payload):
        raise GeminiError("quota exceeded", status=429)


def _event(body):
    return {
        "requestContext": {"http": {"method": "POST"}},
        "body": json.dumps(body),
        "isBase64Encoded": False,
    }


def test_upstream_failure_is_500_with_details(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.delenv("RELAY_MODE", raising=False)
    monkeypatch.setitem(h.__dict__, "GeminiClient", FailingGemini)

    res = h.lambda_handler(_event({"existingTasks": "buy eggs"}), None)
    assert res["statusCode"] == 500
    assert json.loads(res["body"]) == {
        "error": "Failed to generate content from Gemini API.",
        "details": "API key not valid. Please pass a valid API key.",
    }


def test_upstream_failure_in_passthrough_mode(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setenv("RELAY_MODE", "passthrough")
    monkeypatch.setitem(h.__dict__, "GeminiClient", FailingGemini)

    res = h.lambda_handler(_event({"contents": []}), None)
    assert res["statusCode"] == 500
    assert json.loads(res["body"])["details"] == "quota exceeded"


class FakeResponse:
    def __init__(self, data: bytes = b"", exc: Exception | None = None):
        self._data = data
        self._exc = exc

    def read(self):
        if self._exc is not None:
            raise self._exc
        return self._data

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _real_client(monkeypatch, response):
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.delenv("RELAY_MODE", raising=False)
    monkeypatch.setitem(h.__dict__, "GeminiClient", gemini.GeminiClient)
    monkeypatch.setattr(gemini.urllib.request, "urlopen", lambda req, timeout: response)


def test_connection_reset_while_reading_is_500(monkeypatch):
    reset = ConnectionResetError(104, "Connection reset by peer")
    _real_client(monkeypatch, FakeResponse(exc=reset))

    res = h.lambda_handler(_event({"existingTasks": "buy eggs"}), None)
    assert res["statusCode"] == 500
    body = json.loads(res["body"])
    assert body["error"] == "Failed to generate content from Gemini API."
    assert "Connection reset by peer" in body["details"]


@pytest.mark.parametrize(
    "upstream",
    [
        {"candidates": ["x"]},
        {"candidates": [{"content": {"parts": "Buy milk"}}]},
        ["not", "an", "object"],
    ],
)
def test_malformed_upstream_reply_is_500(monkeypatch, upstream):
    _real_client(monkeypatch, FakeResponse(json.dumps(upstream).encode("utf-8")))

    res = h.lambda_handler(_event({"existingTasks": "buy eggs"}), None)
    assert res["statusCode"] == 500
    assert json.loads(res["body"]) == {
        "error": "Failed to generate content from Gemini API.",
        "details": "Gemini returned an unexpected response shape",
    }


def test_real_client_success_is_trimmed(monkeypatch):
    out = {"candidates": [{"content": {"parts": [{"text": "  Buy milk  "}]}}]}
    _real_client(monkeypatch, FakeResponse(json.dumps(out).encode("utf-8")))

    res = h.lambda_handler(_event({"existingTasks": "buy eggs"}), None)
    assert res["statusCode"] == 200
    assert json.loads(res["body"]) == {"suggestion": "Buy milk"}
