"""FastAPI dependencies."""
from typing import Optional

from fastapi import Depends

from clawcast.core import config
from clawcast.core.config import Settings
from clawcast.services.call_session.store import SessionStore
from clawcast.services.completion.base import CompletionBackend
from clawcast.services.completion.factory import build_backend
from clawcast.services.events.router import EventRouter

# Process-wide instances, created on first use
_session_store: Optional[SessionStore] = None
_completion_backend: Optional[CompletionBackend] = None


def get_settings() -> Settings:
    """Get application settings."""
    return config.settings


def get_session_store(settings: Settings = Depends(get_settings)) -> SessionStore:
    """Get the session store shared by all requests."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore(max_turns=settings.max_turns)
    return _session_store


def get_completion_backend(
    settings: Settings = Depends(get_settings),
) -> CompletionBackend:
    """Get the completion backend for the configured provider."""
    global _completion_backend
    if _completion_backend is None:
        _completion_backend = build_backend(settings)
    return _completion_backend


def get_event_router(
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
    backend: CompletionBackend = Depends(get_completion_backend),
) -> EventRouter:
    """Get an event router bound to the shared store and backend."""
    return EventRouter(store, backend, settings.system_prompt)


async def close_completion_backend() -> None:
    """Release the backend's network client, if one was created."""
    global _completion_backend
    if _completion_backend is not None:
        await _completion_backend.aclose()
        _completion_backend = None
