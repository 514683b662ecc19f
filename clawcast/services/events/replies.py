"""Spoken replies returned to the voice platform."""
from typing import Any, Dict

NO_USER_MESSAGE_REPLY = "I didn't catch that. Could you repeat?"
FUNCTION_CALL_REPLY = "I don't have that capability wired up yet."
BACKEND_UNAVAILABLE_REPLY = (
    "Sorry, I'm temporarily unavailable. Give me a moment and try again."
)


def say(message: str) -> Dict[str, Any]:
    """Build a response that makes the platform speak a message."""
    return {"results": [{"type": "say", "message": message}]}


def acknowledge() -> Dict[str, Any]:
    """Build an empty acknowledgment."""
    return {}
