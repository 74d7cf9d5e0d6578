"""
Prompt text and generateContent payload construction.
"""

from __future__ import annotations

import json
from typing import Any

SYSTEM_PROMPT = (
    "You are a helpful assistant. Your only job is to suggest a single, short, "
    "common to-do list item. Make it a simple action. Examples: 'Buy milk', "
    "'Walk the dog', 'Pay electricity bill', 'Call mom'. Do not add any preamble "
    "or extra text. Just return the task text."
)

NO_TASKS = "none"


def existing_tasks_from(body: Any) -> str:
    """Pick `existingTasks` out of a parsed body, falling back to "none"."""
    if not isinstance(body, dict):
        return NO_TASKS
    tasks = body.get("existingTasks")
    if not tasks:
        return NO_TASKS
    return _render(tasks)


def _render(value: Any) -> str:
    # Lists read as "a, b"; other non-strings are spelled as JSON (true, 5, {...})
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(_render(v) for v in value)
    return json.dumps(value, ensure_ascii=False)


def build_user_query(existing_tasks: str) -> str:
    return f"My current tasks are: {existing_tasks}. Suggest one new, simple task."


def build_generate_request(user_query: str, system: str = SYSTEM_PROMPT) -> dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": user_query}]}],
        "systemInstruction": {"parts": [{"text": system}]},
    }
