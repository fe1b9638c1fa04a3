"""
Pytest configuration and shared fixtures.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Required settings must exist BEFORE any imports that read configuration
os.environ.setdefault("BRIDGE_KEY", "test-bridge-key")
os.environ.setdefault("WORKER_KEY", "test-worker-key")
os.environ.setdefault("OTEL_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("QUEUE_NAMESPACE", "test:relay")

from ticket_relay.api.dependencies import get_kicker  # noqa: E402
from ticket_relay.api.main import create_app  # noqa: E402
from ticket_relay.config import Settings, get_settings  # noqa: E402
from ticket_relay.queue.facade import RelayQueue  # noqa: E402
from ticket_relay.store import close_store, init_store  # noqa: E402
from ticket_relay.store.memory import InMemoryKeyValueStore  # noqa: E402


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingKicker:
    """Stands in for WorkerKicker and records requested origins."""

    def __init__(self):
        self.origins: list[str | None] = []

    async def kick(self, origin: str | None) -> bool:
        self.origins.append(origin)
        return True


@pytest.fixture
def clock() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryKeyValueStore:
    """Create an empty in-memory store driven by the fake clock."""
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        bridge_key="test-bridge-key",
        worker_key="test-worker-key",
        queue_namespace="test:relay",
        log_level="DEBUG",
        log_format="console",
        otel_enabled=False,
    )


@pytest.fixture
def relay(store: InMemoryKeyValueStore, test_settings: Settings) -> RelayQueue:
    """Create a queue facade over the in-memory store."""
    return RelayQueue.from_settings(store, test_settings)


@pytest.fixture
def kicker() -> RecordingKicker:
    """Create a kicker that only records calls."""
    return RecordingKicker()


@pytest_asyncio.fixture
async def app(
    store: InMemoryKeyValueStore,
    kicker: RecordingKicker,
) -> AsyncGenerator[FastAPI]:
    """Create a FastAPI app for testing with the in-memory store."""
    get_settings.cache_clear()
    await init_store(store)

    app = create_app(store)
    app.dependency_overrides[get_kicker] = lambda: kicker
    yield app

    # Cleanup
    await close_store()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def bridge_headers() -> dict[str, str]:
    """Headers accepted by the intake webhook."""
    return {"X-Bridge-Key": "test-bridge-key"}


@pytest.fixture
def worker_headers() -> dict[str, str]:
    """Headers accepted by the worker endpoints."""
    return {"X-Worker-Key": "test-worker-key"}


@pytest.fixture
def sample_ticket() -> dict[str, Any]:
    """Create a sample ticket webhook body."""
    return {
        "ticketId": 4821,
        "company": "Acme Corp",
        "subject": "Calendar delegation",
        "description": "Please give my assistant access to my calendar.",
        "vip": True,
    }
