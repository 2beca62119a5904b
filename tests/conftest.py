"""Shared fixtures for paste-server tests."""

import random
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from paste_server.api.app import create_app
from paste_server.config.paste import PasteSettings
from paste_server.config.settings import Settings
from paste_server.pastes import (
    MemoryPasteStore,
    PasteCreate,
    PasteLifecycleManager,
    PasteService,
)


FROZEN_NOW = datetime(2026, 3, 1, 9, 30, 0, tzinfo=UTC)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FROZEN_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def paste_settings() -> PasteSettings:
    return PasteSettings()


@pytest.fixture
def manager(paste_settings: PasteSettings, clock: FrozenClock) -> PasteLifecycleManager:
    """Lifecycle manager with a seeded random source and frozen clock."""
    return PasteLifecycleManager(paste_settings, rng=random.Random(1234), clock=clock)


@pytest.fixture
def memory_store(clock: FrozenClock) -> MemoryPasteStore:
    return MemoryPasteStore(clock=clock)


@pytest.fixture
def service(
    memory_store: MemoryPasteStore, manager: PasteLifecycleManager
) -> PasteService:
    return PasteService(store=memory_store, manager=manager)


@pytest.fixture
def create_body() -> PasteCreate:
    return PasteCreate.model_validate(
        {"content": ["line one", "line two"], "name": "notes", "fileType": "markdown"}
    )


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings using in-memory storage and a throwaway database path."""
    return Settings(
        server={"log_level": "WARNING"},
        storage={"backend": "memory", "database_path": str(tmp_path / "pastes.db")},
    )


@pytest.fixture
def client(test_settings: Settings):
    """TestClient running the full app lifespan."""
    app = create_app(settings=test_settings)
    with TestClient(app) as test_client:
        yield test_client
