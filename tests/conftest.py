"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from form_duration_tracker.adapters.memory_session_store import InMemorySessionStore
from form_duration_tracker.adapters.memory_submission_repository import (
    InMemorySubmissionRepository,
)
from form_duration_tracker.config import Settings
from form_duration_tracker.containers import AppContainer, build_container

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


@dataclass
class FrozenClock:
    """Clock that only moves when told to."""

    now: datetime = NOW
    calls: int = field(default=0)

    def __call__(self) -> datetime:
        self.calls += 1
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_token="admin-token")


@pytest.fixture
def repository() -> InMemorySubmissionRepository:
    return InMemorySubmissionRepository()


@pytest.fixture
def container(
    settings: Settings,
    repository: InMemorySubmissionRepository,
    clock: FrozenClock,
) -> AppContainer:
    return build_container(settings, repository=repository, clock=clock)
