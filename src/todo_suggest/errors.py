"""
Relay error kinds. Each one knows its HTTP status and JSON body.
"""

from __future__ import annotations

from typing import Any


class RelayError(Exception):
    status = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message

    def body(self) -> dict[str, Any]:
        return {"error": self.message}


class MethodNotAllowed(RelayError):
    status = 405
    message = "Method Not Allowed"


class MissingConfiguration(RelayError):
    status = 500
    message = "Server configuration error: GEMINI_API_KEY is not set."


class InvalidRequestBody(RelayError):
    status = 400
    message = "Invalid JSON body"


class UpstreamCallFailure(RelayError):
    status = 500
    message = "Failed to generate content from Gemini API."

    def __init__(self, details: str) -> None:
        super().__init__()
        self.details = details

    def body(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}
