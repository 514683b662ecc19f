"""Application configuration."""
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = (
    "You are a sharp, witty AI assistant on a live stream. Keep responses concise, "
    "1-3 sentences max unless asked to elaborate. Be direct, opinionated, and engaging. "
    "No corporate speak."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3456

    # Completion backend
    llm_api_key: str = ""
    anthropic_api_key: str = ""  # Used when LLM_API_KEY is unset or blank
    llm_base_url: str = "https://api.anthropic.com"
    llm_model: str = "claude-sonnet-4-20250514"
    llm_provider: Literal["anthropic", "openai"] = "anthropic"
    max_tokens: int = Field(default=200, gt=0)
    llm_timeout_seconds: float = Field(default=7.0, gt=0)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Webhook auth (empty disables the check)
    vapi_secret: str = ""

    # Conversation memory
    max_turns: int = Field(default=40, gt=0)
    session_idle_ttl_seconds: float = Field(default=7200.0, ge=0)
    session_sweep_interval_seconds: float = Field(default=60.0, gt=0)

    # Logging
    log_level: Literal["debug", "info", "error"] = "info"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("llm_provider", "log_level", mode="before")
    @classmethod
    def _lowercase(cls, value: object) -> object:
        """Accept LOG_LEVEL=INFO, LLM_PROVIDER=OpenAI and the like."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def _fall_back_to_anthropic_key(self) -> "Settings":
        """Use ANTHROPIC_API_KEY when LLM_API_KEY is missing or blank."""
        if not self.llm_api_key.strip():
            self.llm_api_key = self.anthropic_api_key
        return self


settings = Settings()
