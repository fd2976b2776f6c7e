"""Shared utilities for Discord commands."""

from typing import Any

from src.clients.discord.constants import MESSAGE_CONTENT_LIMIT

TRUNCATION_MARKER = "\n…"


def truncate_content(text: str, limit: int = MESSAGE_CONTENT_LIMIT) -> str:
    """Fit message text into Discord's content limit.

    Cuts at the last full line that fits and appends a marker, so list
    entries are never split mid-line.

    Args:
        text: The original text.
        limit: Maximum number of characters.

    Returns:
        The text unchanged if it fits, otherwise a shortened copy.
    """
    if len(text) <= limit:
        return text
    budget = limit - len(TRUNCATION_MARKER)
    cut = text.rfind("\n", 0, budget)
    if cut <= 0:
        cut = budget
    return text[:cut] + TRUNCATION_MARKER


def find_text_input_value(data: Any, input_id: str) -> str | None:
    """Find the submitted value of a text input in modal interaction data.

    Args:
        data: The raw interaction data of a modal submission.
        input_id: custom_id of the text input.

    Returns:
        The submitted value, or None if the input is absent.
    """
    for row in data.get("components", []) if data else []:
        children = row.get("components") or [row.get("component") or {}]
        for component in children:
            if component.get("custom_id") == input_id:
                return component.get("value")
    return None
