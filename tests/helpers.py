"""Test doubles and payload builders."""
import asyncio
from typing import List, Optional, Sequence

from clawcast.services.call_session.models import Turn
from clawcast.services.completion.base import CompletionBackend

TEST_SYSTEM_PROMPT = "You are a test assistant."


class FakeBackend(CompletionBackend):
    """Completion backend that replies from a script and records every call."""

    provider = "fake"

    def __init__(
        self,
        reply: str = "Test reply.",
        error: Optional[Exception] = None,
        delay: float = 0.0,
        timeout_seconds: float = 7.0,
    ):
        super().__init__(model="fake-model", timeout_seconds=timeout_seconds)
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: List[tuple] = []

    async def _request(self, turns: Sequence[Turn], system_prompt: str) -> str:
        self.calls.append((list(turns), system_prompt))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


def assistant_request(call_id: Optional[str], messages: list, nested: bool = True) -> dict:
    """Build an assistant-request event the way the platform sends it."""
    body = {"type": "assistant-request", "artifact": {"messages": messages}}
    if call_id is not None:
        body["call"] = {"id": call_id}
    return {"message": body} if nested else body
