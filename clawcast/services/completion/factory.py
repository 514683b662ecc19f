"""Pick the completion backend for the configured provider."""
from clawcast.core.config import Settings
from clawcast.services.completion.anthropic import AnthropicBackend
from clawcast.services.completion.base import CompletionBackend
from clawcast.services.completion.openai_compat import OpenAICompatBackend


def build_backend(settings: Settings) -> CompletionBackend:
    """Create a backend from settings."""
    backend_cls = {
        "anthropic": AnthropicBackend,
        "openai": OpenAICompatBackend,
    }.get(settings.llm_provider)
    if backend_cls is None:
        raise ValueError(f"Unsupported LLM provider: {settings.llm_provider}")

    return backend_cls(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        model=settings.llm_model,
        max_tokens=settings.max_tokens,
        timeout_seconds=settings.llm_timeout_seconds,
    )
