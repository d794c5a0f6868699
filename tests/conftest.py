"""Shared test fixtures."""

import asyncio
from typing import Any

import pytest

from edge_guard.stores import InMemoryStore, KeyValueStore


class FakeClock:
    def __init__(self, start_ms: int = 1_000_000):
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += round(seconds * 1000)


class FailingStore(KeyValueStore):
    """Every operation raises, like an unreachable backend."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def get(self, key: str) -> Any | None:
        self.calls.append("get")
        raise ConnectionError("store unavailable")

    async def put(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        self.calls.append("put")
        raise ConnectionError("store unavailable")

    async def delete(self, key: str) -> None:
        self.calls.append("delete")
        raise ConnectionError("store unavailable")


class RecordingStore(InMemoryStore):
    """InMemoryStore that remembers the TTL of every write."""

    def __init__(self, clock=None) -> None:
        super().__init__(clock=clock)
        self.ttls: dict[str, int | None] = {}

    async def put(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        self.ttls[key] = ttl_seconds
        await super().put(key, value, ttl_seconds=ttl_seconds)


class SlowStore(InMemoryStore):
    """Every read and write stalls well past any sensible store timeout."""

    async def get(self, key: str) -> Any | None:
        await asyncio.sleep(1)
        return await super().get(key)

    async def put(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        await asyncio.sleep(1)
        await super().put(key, value, ttl_seconds=ttl_seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return RecordingStore(clock=clock)


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def slow_store(clock):
    return SlowStore(clock=clock)
