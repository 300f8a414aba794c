"""Pytest configuration and shared fixtures."""

import uuid
from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from rest_framework.test import APIClient

from booths.domain import Booth, BoothId
from booths.stores.memory_store import InMemoryBoothStore, InMemoryParticipantCounter

T0 = datetime(2024, 5, 1, 10, 0, tzinfo=dt_timezone.utc)


class FakeClock:
    """Callable clock that tests move forward by hand."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def store() -> InMemoryBoothStore:
    return InMemoryBoothStore()


@pytest.fixture
def participants() -> InMemoryParticipantCounter:
    return InMemoryParticipantCounter()


@pytest.fixture
def make_booth(store, clock):
    """Factory that seeds a booth into the in-memory store."""

    def factory(
        name: str = "Robotics",
        code: str | None = "ABC123",
        expires_in: timedelta | None = timedelta(days=30),
        is_active: bool = True,
        max_operators: int = 3,
    ) -> Booth:
        booth = Booth(
            id=BoothId(uuid.uuid4()),
            name=name,
            code=code,
            code_expires_at=clock() + expires_in if expires_in is not None else None,
            is_active=is_active,
            max_operators=max_operators,
        )
        return store.add_booth(booth)

    return factory
