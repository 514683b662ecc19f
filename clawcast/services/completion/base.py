"""Completion backend interface."""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Sequence

from clawcast.services.call_session.models import Turn

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 7.0


class CompletionError(Exception):
    """Raised when the completion backend cannot produce a reply."""


class CompletionTimeoutError(CompletionError):
    """Raised when the backend did not answer within the deadline."""


class CompletionDecodeError(CompletionError):
    """Raised when the backend reply does not carry the expected text."""


class CompletionBackend(ABC):
    """Abstract base class for completion backends."""

    provider: str = ""

    def __init__(
        self,
        model: str,
        max_tokens: int = 200,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

    async def complete(self, turns: Sequence[Turn], system_prompt: str) -> str:
        """
        Generate the next assistant reply for a conversation.

        Args:
            turns: Conversation so far, oldest first
            system_prompt: Fixed instructions for the agent

        Returns:
            Reply text

        Raises:
            CompletionTimeoutError: The request outlived timeout_seconds
            CompletionError: Any other backend failure
        """
        start = time.perf_counter()
        try:
            text = await asyncio.wait_for(
                self._request(turns, system_prompt), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise CompletionTimeoutError(
                f"LLM timeout after {self.timeout_seconds}s"
            ) from e
        logger.debug(
            f"[COMPLETION] {self.provider} responded in "
            f"{(time.perf_counter() - start) * 1000:.0f}ms"
        )
        return text

    @abstractmethod
    async def _request(self, turns: Sequence[Turn], system_prompt: str) -> str:
        """Send one request and decode the reply text."""
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        pass
