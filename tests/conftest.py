"""Shared test fixtures and configuration."""
import os

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ.setdefault("VAPI_SECRET", "")

from clawcast.main import app
from clawcast.core.config import Settings
from clawcast.core.dependencies import (
    get_completion_backend,
    get_session_store,
    get_settings,
)
from clawcast.services.call_session.store import SessionStore
from clawcast.services.completion.base import CompletionError
from clawcast.services.events.router import EventRouter
from tests.helpers import TEST_SYSTEM_PROMPT, FakeBackend


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        llm_api_key="test-key",
        llm_provider="anthropic",
        llm_model="test-model",
        system_prompt=TEST_SYSTEM_PROMPT,
        vapi_secret="",
        max_turns=40,
    )


@pytest.fixture
def store():
    """Fresh session store."""
    return SessionStore(max_turns=40)


@pytest.fixture
def fake_backend():
    return FakeBackend(reply="It's five o'clock.")


@pytest.fixture
def failing_backend():
    return FakeBackend(error=CompletionError("connection refused"))


@pytest.fixture
def event_router(store, fake_backend):
    return EventRouter(store, fake_backend, TEST_SYSTEM_PROMPT)


@pytest.fixture
def test_client(test_settings, store, fake_backend):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_completion_backend] = lambda: fake_backend

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()
