"""
Todo Suggestion Relay (Lambda + Gemini)

Where: AWS Lambda via Function URL (to-do app frontend target).
What:  Validate request, build prompt from existing tasks, call Gemini, relay suggestion.
Why:   Keep the Gemini API key server-side; the browser only sees the suggestion.
"""

__all__ = [
    "config",
    "errors",
    "gemini",
    "handler",
    "prompts",
    "secrets",
]
