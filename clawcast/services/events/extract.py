"""Field lookup over webhook payloads.

The platform nests most fields under ``message`` but some event variants put
them at the top level, so every lookup tries ``message.<path>`` first and then
``<path>``.
"""
from typing import Any, Dict, List, Optional, Sequence

DEFAULT_CALL_ID = "default"


def dig(data: Any, path: Sequence[str]) -> Any:
    """Follow a key path through nested dicts. Returns None if any hop is missing."""
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def lookup(event: Any, *path: str) -> Any:
    """Find a field under event.message, falling back to the top level."""
    value = dig(event, ("message", *path))
    if value is None:
        value = dig(event, path)
    return value


def event_type(event: Any) -> Optional[str]:
    value = lookup(event, "type")
    return value if isinstance(value, str) else None


def call_id(event: Any) -> Optional[str]:
    value = lookup(event, "call", "id")
    if value is None or value == "":
        return None
    return str(value)


def artifact_messages(event: Any) -> List[Dict[str, Any]]:
    messages = lookup(event, "artifact", "messages")
    if not isinstance(messages, list):
        return []
    return [m for m in messages if isinstance(m, dict)]


def message_text(message: Dict[str, Any]) -> Optional[str]:
    """Text of a transcript message: ``content``, or ``message`` in artifact format."""
    for key in ("content", "message"):
        value = message.get(key)
        if isinstance(value, str):
            return value
    return None


def last_user_message(event: Any) -> Optional[str]:
    """
    Get the most recent thing the caller said.

    Returns:
        The text, or None when there is no user message or the latest one is blank
    """
    for message in reversed(artifact_messages(event)):
        if message.get("role") == "user":
            text = message_text(message)
            return text if text and text.strip() else None
    return None


def status(event: Any) -> Optional[str]:
    value = lookup(event, "status")
    return value if isinstance(value, str) else None


def function_name(event: Any) -> Optional[str]:
    value = dig(lookup(event, "functionCall"), ("name",))
    return value if isinstance(value, str) else None


def transcript(event: Any) -> Dict[str, Any]:
    value = lookup(event, "transcript")
    if isinstance(value, dict):
        return value
    # Transcript events may carry the text and role directly
    return {"text": value, "role": lookup(event, "role")}
