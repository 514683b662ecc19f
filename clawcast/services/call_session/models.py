"""Call session models."""
import time
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class Turn(BaseModel):
    """One message in a call's conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class CallSession(BaseModel):
    """Conversation memory for a single voice call."""

    call_id: str
    turns: List[Turn] = Field(default_factory=list)
    created_at: float = Field(default_factory=time.monotonic)
    last_activity: float = Field(default_factory=time.monotonic)

    def touch(self) -> None:
        """Mark the session as active now."""
        self.last_activity = time.monotonic()

    def idle_for(self, now: float) -> float:
        """Seconds since the last recorded activity."""
        return now - self.last_activity
