"""
Shared fixtures: a zero-latency mock data source with call counting,
a controllable clock and isolated local storage.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from velo.cache import CacheStore
from velo.orchestrator import APIOrchestrator
from velo.sources import MockDataSource
from velo.storage import LocalStorage


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: datetime = datetime(2025, 4, 1, 8, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class CountingMockSource(MockDataSource):
    """MockDataSource that records how often each operation ran."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = {}

    async def _simulate_latency(self, operation: str) -> None:
        self.calls[operation] = self.calls.get(operation, 0) + 1
        await super()._simulate_latency(operation)


class NoActivePlanSource(CountingMockSource):
    """A user without an active nutrition plan."""

    async def active_nutrition_plan(self):
        await self._simulate_latency("active_nutrition_plan")
        return None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "local_storage.db")


@pytest.fixture
def source(storage):
    return CountingMockSource(
        storage=storage,
        latency_scale=0,
        seed=42,
        today=lambda: date(2025, 4, 1),
    )


@pytest.fixture
def cache(clock):
    return CacheStore(max_entries=100, clock=clock)


@pytest.fixture
def orchestrator(source, cache):
    return APIOrchestrator(source=source, cache=cache)
