"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - relay_env: Deterministic provider configuration in the environment
    - provider: Fake upstream provider served through httpx.MockTransport
    - relay_app: The FastAPI app wired to the fake provider
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from chatrelay.api import app
from chatrelay.api.chat import get_upstream_transport
from tests.fakes import TEST_API_KEY, FakeProvider


@pytest.fixture(autouse=True)
def relay_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin provider configuration so a local .env cannot leak into tests."""
    monkeypatch.setenv("OPENROUTER_API_KEY", TEST_API_KEY)
    for name in ("LLM_API_KEY", "LLM_BASE_URL", "LLM_MODEL", "LLM_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def provider() -> FakeProvider:
    """Fake provider streaming "Hel", "lo" and the completion sentinel."""
    return FakeProvider()


@pytest.fixture
def relay_app(provider: FakeProvider) -> Generator[FastAPI]:
    """Application whose outbound calls go to the fake provider."""
    app.dependency_overrides[get_upstream_transport] = lambda: provider.transport
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(relay_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=relay_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
