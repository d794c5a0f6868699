"""ResponseCache — short-lived memo of a slowly changing per-account value."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from edge_guard.config import CacheConfig
from edge_guard.guards.base import Guard
from edge_guard.logging import debug_log, mask_sensitive
from edge_guard.records import CacheEntry

if TYPE_CHECKING:
    from edge_guard._internal.clock import Clock
    from edge_guard.stores.base import KeyValueStore

logger = logging.getLogger(__name__)


class ResponseCache(Guard):
    """Caches one string value per account identity.

    A value is served only while it is at most ``freshness_seconds`` old.
    The record is kept in the store for twice that long, so a stale record
    may still be present but is reported as a miss.

    Caching is an optimization: store failures turn reads into misses and
    writes into no-ops.

    Parameters:
        store:   Key-value store, or ``None`` to disable caching.
        config:  Freshness window and key prefix.
        clock:   Injectable clock for testing.
        timeout: Upper bound in seconds on each store call.
        debug:   Emit hit/miss events on every call.
    """

    _guard_type = "response_cache"
    _guard_description = "Caches per-account values for a short freshness window"
    _config_class = CacheConfig

    config: CacheConfig

    def __init__(
        self,
        store: KeyValueStore | None,
        config: CacheConfig | None = None,
        *,
        clock: Clock | None = None,
        timeout: float | None = None,
        debug: bool = False,
    ) -> None:
        super().__init__(store, config, clock=clock, timeout=timeout, debug=debug)

    def key(self, identity: str) -> str:
        return f"{self.config.prefix}:{identity}"

    def _log_key(self, identity: str) -> str:
        return f"{self.config.prefix}:{mask_sensitive(identity)}"

    async def get(self, identity: str, *, debug: bool = False) -> str | None:
        """Return the fresh cached value for *identity*, or ``None`` on a miss."""
        debug = debug or self.debug
        if self.store is None:
            return None

        try:
            entry = CacheEntry.parse(await self._call(self.store.get(self.key(identity))))
        except Exception as exc:
            self._log_store_failure("get", exc)
            debug_log(logger, "Cache read error", {"key": self._log_key(identity)}, debug)
            return None

        if entry is None:
            debug_log(logger, "Cache miss", {"key": self._log_key(identity)}, debug)
            return None

        age_seconds = (self._now_ms() - entry.cached_at) / 1000
        if age_seconds > self.config.freshness_seconds:
            debug_log(
                logger,
                "Cache expired",
                {"key": self._log_key(identity), "age_seconds": age_seconds},
                debug,
            )
            return None

        debug_log(
            logger,
            "Cache hit",
            {"key": self._log_key(identity), "age_seconds": age_seconds},
            debug,
        )
        return entry.value

    async def set(self, identity: str, value: str, *, debug: bool = False) -> None:
        """Store *value* for *identity*, stamped with the current time."""
        debug = debug or self.debug
        if self.store is None:
            return

        entry = CacheEntry(value=value, cached_at=self._now_ms())
        try:
            await self._call(
                self.store.put(
                    self.key(identity), entry.dump(), ttl_seconds=self.config.retention_seconds
                )
            )
        except Exception as exc:
            self._log_store_failure("set", exc)
            debug_log(logger, "Cache write error", {"key": self._log_key(identity)}, debug)
            return
        debug_log(
            logger,
            "Cache set",
            {"key": self._log_key(identity), "value_length": len(value)},
            debug,
        )
