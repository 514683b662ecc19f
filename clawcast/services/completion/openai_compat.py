"""OpenAI-compatible chat completions backend."""
from typing import Dict, List, Optional, Sequence

import openai
from openai import AsyncOpenAI

from clawcast.services.call_session.models import Turn
from clawcast.services.completion.base import (
    DEFAULT_TIMEOUT_SECONDS,
    CompletionBackend,
    CompletionDecodeError,
    CompletionError,
    CompletionTimeoutError,
)


class OpenAICompatBackend(CompletionBackend):
    """Talks to POST /v1/chat/completions on any OpenAI-compatible server."""

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        max_tokens: int = 200,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[AsyncOpenAI] = None,
    ):
        super().__init__(model, max_tokens, timeout_seconds)
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=f"{base_url.rstrip('/')}/v1",
            timeout=timeout_seconds,
            max_retries=0,
        )

    @staticmethod
    def build_messages(
        turns: Sequence[Turn], system_prompt: str
    ) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": t.role, "content": t.content} for t in turns)
        return messages

    async def _request(self, turns: Sequence[Turn], system_prompt: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=self.build_messages(turns, system_prompt),
            )
        except openai.APITimeoutError as e:
            raise CompletionTimeoutError(f"LLM timeout: {e}") from e
        except openai.OpenAIError as e:
            raise CompletionError(f"OpenAI-compat request failed: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise CompletionDecodeError(f"Unexpected response: {str(response)[:200]}")
        content = choices[0].message.content
        if not isinstance(content, str):
            raise CompletionDecodeError(f"Unexpected response: {str(response)[:200]}")
        return content

    async def aclose(self) -> None:
        await self.client.close()
