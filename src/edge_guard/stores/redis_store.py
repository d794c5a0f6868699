"""RedisStore — shared storage backend over ``redis.asyncio``."""

from __future__ import annotations

from typing import Any

try:
    import redis.asyncio as aioredis
    from redis.exceptions import RedisError
except ImportError as exc:
    raise ImportError(
        "RedisStore requires the 'redis' package. "
        "Install it with: pip install edge-guard[redis]"
    ) from exc

from edge_guard.exceptions import StoreError
from edge_guard.stores import codec
from edge_guard.stores.base import KeyValueStore


class RedisStore(KeyValueStore):
    """Store backed by a Redis server, shareable across processes and hosts.

    Expiry is delegated to Redis (``SET key value EX ttl``).  Values are
    JSON-encoded strings, so other readers of the same keys see the same
    record shapes.  Backend errors are re-raised as
    :class:`~edge_guard.exceptions.StoreError`.

    Parameters:
        client: An existing ``redis.asyncio.Redis`` client.  Takes precedence over *url*.
        url:    Connection URL used to create a client lazily on first use.
    """

    def __init__(
        self,
        client: aioredis.Redis | None = None,
        url: str = "redis://localhost:6379/0",
    ) -> None:
        self._client = client
        self._url = url
        self._owns_client = client is None

    def _get_client(self) -> aioredis.Redis:
        if self._client is None:
            self._client = aioredis.from_url(self._url)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ── Store protocol ───────────────────────────────────────

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._get_client().get(key)
        except RedisError as exc:
            raise StoreError("get", str(exc)) from exc
        return codec.decode(raw)

    async def put(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        try:
            await self._get_client().set(key, codec.encode(value), ex=ttl_seconds)
        except RedisError as exc:
            raise StoreError("put", str(exc)) from exc

    async def delete(self, key: str) -> None:
        try:
            await self._get_client().delete(key)
        except RedisError as exc:
            raise StoreError("delete", str(exc)) from exc
