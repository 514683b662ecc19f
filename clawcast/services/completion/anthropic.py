"""Anthropic Messages API backend."""
from typing import Any, Dict, Optional, Sequence

import httpx

from clawcast.services.call_session.models import Turn
from clawcast.services.completion.base import (
    DEFAULT_TIMEOUT_SECONDS,
    CompletionBackend,
    CompletionDecodeError,
    CompletionError,
    CompletionTimeoutError,
)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicBackend(CompletionBackend):
    """Talks to POST /v1/messages."""

    provider = "anthropic"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        max_tokens: int = 200,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(model, max_tokens, timeout_seconds)
        self.api_key = api_key
        self.url = f"{base_url.rstrip('/')}/v1/messages"
        self.client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    def build_payload(self, turns: Sequence[Turn], system_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt,
            "messages": [{"role": t.role, "content": t.content} for t in turns],
        }

    async def _request(self, turns: Sequence[Turn], system_prompt: str) -> str:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        try:
            response = await self.client.post(
                self.url, json=self.build_payload(turns, system_prompt), headers=headers
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise CompletionTimeoutError(f"LLM timeout: {e}") from e
        except httpx.HTTPStatusError as e:
            raise CompletionError(
                f"Anthropic returned {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Anthropic request failed: {e}") from e
        except ValueError as e:
            raise CompletionDecodeError(f"Invalid JSON from Anthropic: {e}") from e

        return self.extract_text(data)

    @staticmethod
    def extract_text(data: Any) -> str:
        """Pull content[0].text out of a Messages API reply."""
        try:
            text = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionDecodeError(
                f"Unexpected response: {str(data)[:200]}"
            ) from e
        if not isinstance(text, str):
            raise CompletionDecodeError(f"Unexpected response: {str(data)[:200]}")
        return text

    async def aclose(self) -> None:
        await self.client.aclose()
