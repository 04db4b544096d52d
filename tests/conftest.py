"""
Pytest configuration and fixtures.
"""
import pytest
from fastapi.testclient import TestClient

from pastebin.config import Settings
from pastebin.database import InMemoryStore
from pastebin.main import create_app
from pastebin.manager import PasteStoreManager

# 2024-01-01T00:00:00.000Z
START_MS = 1_704_067_200_000


class FakeClock:
    """Clock returning a settable epoch-millisecond value."""

    def __init__(self, now_ms: int = START_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def manager(store, clock):
    return PasteStoreManager(store, clock=clock)


@pytest.fixture
def test_settings(monkeypatch):
    """Settings with TEST_MODE on and no fixed domain."""
    monkeypatch.setenv("TEST_MODE", "1")
    monkeypatch.setenv("APP_DOMAIN", "")
    return Settings()


@pytest.fixture
def client(test_settings, store, clock):
    """HTTP client over an app backed by the in-memory store and fake clock."""
    app = create_app(config=test_settings, store=store)
    with TestClient(app) as test_client:
        app.state.manager.clock = clock
        yield test_client
