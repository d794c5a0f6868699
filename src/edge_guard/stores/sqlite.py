"""SQLiteStore — durable, single-file storage backend using aiosqlite."""

from __future__ import annotations

import asyncio
from typing import Any

try:
    import aiosqlite
except ImportError as exc:
    raise ImportError(
        "SQLiteStore requires the 'aiosqlite' package. "
        "Install it with: pip install edge-guard[sqlite]"
    ) from exc

from edge_guard._internal.clock import Clock, SystemClock
from edge_guard.exceptions import StoreError
from edge_guard.stores import codec
from edge_guard.stores.base import KeyValueStore

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS guard_store (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    expires_at INTEGER
)
"""


class SQLiteStore(KeyValueStore):
    """Persistent store backed by a single SQLite file.

    Expiry is enforced on read (``expires_at`` in epoch milliseconds); expired
    rows are deleted when encountered.  Backend errors are re-raised as
    :class:`~edge_guard.exceptions.StoreError`.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
        clock:   Injectable clock used to stamp and check expiry.
    """

    def __init__(self, db_path: str = "edge_guard.db", clock: Clock | None = None) -> None:
        self._db_path = db_path
        self._clock = clock or SystemClock()
        self._db: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()

    async def _connect(self) -> aiosqlite.Connection:
        async with self._connect_lock:
            if self._db is None:
                db = await aiosqlite.connect(self._db_path)
                await db.execute(_CREATE_TABLE)
                await db.commit()
                self._db = db
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # ── Store protocol ───────────────────────────────────────

    async def get(self, key: str) -> Any | None:
        try:
            db = await self._connect()
            cursor = await db.execute(
                "SELECT value, expires_at FROM guard_store WHERE key = ?",
                (key,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            raw, expires_at = row
            if expires_at is not None and self._clock.now_ms() >= expires_at:
                await db.execute("DELETE FROM guard_store WHERE key = ?", (key,))
                await db.commit()
                return None
        except aiosqlite.Error as exc:
            raise StoreError("get", str(exc)) from exc
        return codec.decode(raw)

    async def put(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock.now_ms() + ttl_seconds * 1000
        try:
            db = await self._connect()
            await db.execute(
                "INSERT OR REPLACE INTO guard_store (key, value, expires_at) VALUES (?, ?, ?)",
                (key, codec.encode(value), expires_at),
            )
            await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError("put", str(exc)) from exc

    async def delete(self, key: str) -> None:
        try:
            db = await self._connect()
            await db.execute("DELETE FROM guard_store WHERE key = ?", (key,))
            await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError("delete", str(exc)) from exc

    async def purge_expired(self) -> int:
        """Delete every expired row and return how many were removed."""
        try:
            db = await self._connect()
            cursor = await db.execute(
                "DELETE FROM guard_store WHERE expires_at IS NOT NULL AND expires_at <= ?",
                (self._clock.now_ms(),),
            )
            await db.commit()
        except aiosqlite.Error as exc:
            raise StoreError("purge_expired", str(exc)) from exc
        return cursor.rowcount
