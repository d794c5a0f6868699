"""InMemoryStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

from typing import Any

from edge_guard._internal.clock import Clock, SystemClock
from edge_guard.stores import codec
from edge_guard.stores.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """In-memory store with per-key expiry.  Data is lost on process exit.

    Values are kept JSON-encoded, so reads return fresh copies and writes
    reject anything a remote backend could not store either.  Expired keys
    are dropped when read or by :meth:`purge_expired`; keys that are never
    read again stay until purged.

    Parameters:
        clock: Injectable clock; share a fake with the guards to simulate expiry.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._data: dict[str, tuple[str, int | None]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        raw, expires_at = entry
        if expires_at is not None and self._clock.now_ms() >= expires_at:
            del self._data[key]
            return None
        return codec.decode(raw)

    async def put(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock.now_ms() + ttl_seconds * 1000
        self._data[key] = (codec.encode(value), expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def purge_expired(self) -> int:
        """Delete every expired key and return how many were removed."""
        now = self._clock.now_ms()
        expired = [
            key
            for key, (_, expires_at) in self._data.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._data[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._data)
