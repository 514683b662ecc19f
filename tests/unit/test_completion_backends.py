"""Unit tests for completion backends."""
import json
from unittest.mock import AsyncMock, Mock

import httpx
import openai
import pytest

from clawcast.core.config import Settings
from clawcast.services.call_session.models import Turn
from clawcast.services.completion.anthropic import AnthropicBackend
from clawcast.services.completion.base import (
    CompletionDecodeError,
    CompletionError,
    CompletionTimeoutError,
)
from clawcast.services.completion.factory import build_backend
from clawcast.services.completion.openai_compat import OpenAICompatBackend
from tests.helpers import FakeBackend

TURNS = [
    Turn(role="user", content="Hi"),
    Turn(role="assistant", content="Hello!"),
    Turn(role="user", content="What time is it?"),
]


def anthropic_backend(handler) -> AnthropicBackend:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AnthropicBackend(
        api_key="sk-test",
        base_url="https://llm.test/",
        model="claude-test",
        max_tokens=200,
        http_client=client,
    )


def openai_backend(create: AsyncMock) -> OpenAICompatBackend:
    mock_client = Mock()
    mock_client.chat.completions.create = create
    return OpenAICompatBackend(
        api_key="sk-test",
        base_url="https://llm.test",
        model="gpt-test",
        max_tokens=150,
        client=mock_client,
    )


class TestTimeoutWrapper:
    """Test the timeout shared by every backend."""

    @pytest.mark.asyncio
    async def test_slow_backend_times_out(self):
        backend = FakeBackend(delay=1.0, timeout_seconds=0.05)

        with pytest.raises(CompletionTimeoutError):
            await backend.complete(TURNS, "system")

    @pytest.mark.asyncio
    async def test_fast_backend_returns(self):
        backend = FakeBackend(reply="done", timeout_seconds=1.0)

        assert await backend.complete(TURNS, "system") == "done"

    def test_timeout_is_a_completion_error(self):
        assert issubclass(CompletionTimeoutError, CompletionError)
        assert issubclass(CompletionDecodeError, CompletionError)


class TestAnthropicBackend:
    """Test the Messages API variant."""

    @pytest.mark.asyncio
    async def test_request_shape_and_reply(self):
        """Test URL, headers, body and reply decoding."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(
                200, json={"content": [{"type": "text", "text": "It's five o'clock."}]}
            )

        backend = anthropic_backend(handler)
        reply = await backend.complete(TURNS, "Be brief.")

        assert reply == "It's five o'clock."
        request = captured["request"]
        assert str(request.url) == "https://llm.test/v1/messages"
        assert request.headers["x-api-key"] == "sk-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        body = json.loads(request.content)
        assert body == {
            "model": "claude-test",
            "max_tokens": 200,
            "system": "Be brief.",
            "messages": [
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello!"},
                {"role": "user", "content": "What time is it?"},
            ],
        }

    @pytest.mark.asyncio
    async def test_missing_content_is_decode_error(self):
        backend = anthropic_backend(lambda request: httpx.Response(200, json={"content": []}))

        with pytest.raises(CompletionDecodeError):
            await backend.complete(TURNS, "system")

    @pytest.mark.asyncio
    async def test_invalid_json_is_decode_error(self):
        backend = anthropic_backend(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(CompletionDecodeError):
            await backend.complete(TURNS, "system")

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        backend = anthropic_backend(
            lambda request: httpx.Response(529, json={"type": "error", "error": {"type": "overloaded_error"}})
        )

        with pytest.raises(CompletionError) as exc_info:
            await backend.complete(TURNS, "system")
        assert "529" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        backend = anthropic_backend(handler)

        with pytest.raises(CompletionTimeoutError):
            await backend.complete(TURNS, "system")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        backend = anthropic_backend(handler)

        with pytest.raises(CompletionError):
            await backend.complete(TURNS, "system")


class TestOpenAICompatBackend:
    """Test the chat completions variant."""

    @pytest.mark.asyncio
    async def test_request_shape_and_reply(self):
        """Test that the system prompt is prepended and the reply decoded."""
        completion = Mock(choices=[Mock(message=Mock(content="It's five o'clock."))])
        create = AsyncMock(return_value=completion)
        backend = openai_backend(create)

        reply = await backend.complete(TURNS, "Be brief.")

        assert reply == "It's five o'clock."
        create.assert_awaited_once_with(
            model="gpt-test",
            max_tokens=150,
            messages=[
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello!"},
                {"role": "user", "content": "What time is it?"},
            ],
        )

    @pytest.mark.asyncio
    async def test_no_choices_is_decode_error(self):
        backend = openai_backend(AsyncMock(return_value=Mock(choices=[])))

        with pytest.raises(CompletionDecodeError):
            await backend.complete(TURNS, "system")

    @pytest.mark.asyncio
    async def test_null_content_is_decode_error(self):
        completion = Mock(choices=[Mock(message=Mock(content=None))])
        backend = openai_backend(AsyncMock(return_value=completion))

        with pytest.raises(CompletionDecodeError):
            await backend.complete(TURNS, "system")

    @pytest.mark.asyncio
    async def test_api_timeout(self):
        request = httpx.Request("POST", "https://llm.test/v1/chat/completions")
        backend = openai_backend(AsyncMock(side_effect=openai.APITimeoutError(request=request)))

        with pytest.raises(CompletionTimeoutError):
            await backend.complete(TURNS, "system")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        request = httpx.Request("POST", "https://llm.test/v1/chat/completions")
        backend = openai_backend(
            AsyncMock(side_effect=openai.APIConnectionError(request=request))
        )

        with pytest.raises(CompletionError):
            await backend.complete(TURNS, "system")


class TestBuildBackend:
    """Test provider selection."""

    def test_anthropic_provider(self):
        settings = Settings(
            llm_provider="anthropic",
            llm_base_url="https://api.anthropic.com",
            llm_model="claude-test",
            max_tokens=123,
            llm_timeout_seconds=3.0,
        )

        backend = build_backend(settings)

        assert isinstance(backend, AnthropicBackend)
        assert backend.url == "https://api.anthropic.com/v1/messages"
        assert backend.model == "claude-test"
        assert backend.max_tokens == 123
        assert backend.timeout_seconds == 3.0

    def test_openai_provider(self):
        settings = Settings(
            llm_provider="OpenAI",
            llm_api_key="sk-test",
            llm_base_url="https://api.openai.com",
            llm_model="gpt-test",
        )

        backend = build_backend(settings)

        assert isinstance(backend, OpenAICompatBackend)
        assert str(backend.client.base_url).rstrip("/") == "https://api.openai.com/v1"
