"""Webhook event kinds."""
from enum import Enum


class EventKind(str, Enum):
    """Event types sent by the voice platform."""

    ASSISTANT_REQUEST = "assistant-request"  # Caller spoke, platform wants a reply
    FUNCTION_CALL = "function-call"
    STATUS_UPDATE = "status-update"
    TRANSCRIPT = "transcript"
    HANG = "hang"
    SPEECH_UPDATE = "speech-update"
    CONVERSATION_UPDATE = "conversation-update"
    END_OF_CALL_REPORT = "end-of-call-report"
    UNKNOWN = "unknown"

    @classmethod
    def classify(cls, value: object) -> "EventKind":
        """Map a raw type value to a kind, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    def __str__(self) -> str:
        """Return the string value of the kind."""
        return self.value


# Kinds that need no handling beyond an empty acknowledgment
INFORMATIONAL_KINDS = frozenset(
    {
        EventKind.HANG,
        EventKind.SPEECH_UPDATE,
        EventKind.CONVERSATION_UPDATE,
        EventKind.END_OF_CALL_REPORT,
    }
)

# Call status that means the call is over
CALL_ENDED_STATUS = "ended"
