"""RateLimiter — fixed-window request counter per client identity."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from edge_guard.config import RateLimitConfig
from edge_guard.guards.base import Guard
from edge_guard.logging import debug_log
from edge_guard.records import RateWindow

if TYPE_CHECKING:
    from edge_guard._internal.clock import Clock
    from edge_guard.stores.base import KeyValueStore

logger = logging.getLogger(__name__)

_KEY_PREFIX = "rate"


class RateLimiter(Guard):
    """Limits how many requests one client may make within a window.

    The window opens with the first request and lasts ``window_seconds``;
    it is not extended by later requests or by denials.  Once the window
    has passed, the next request opens a new one with a count of 1.

    Counting is read-then-write with no atomic increment, so concurrent
    requests from the same client can be undercounted.

    Parameters:
        store:   Shared key-value store, or ``None`` to allow everything.
        config:  Limit and window length.
        clock:   Injectable clock for testing.
        timeout: Upper bound in seconds on each store call.
        debug:   Emit decision events on every call.
    """

    _guard_type = "rate_limit"
    _guard_description = "Limits request rate per client identity within a fixed window"
    _config_class = RateLimitConfig

    config: RateLimitConfig

    def __init__(
        self,
        store: KeyValueStore | None,
        config: RateLimitConfig | None = None,
        *,
        clock: Clock | None = None,
        timeout: float | None = None,
        debug: bool = False,
    ) -> None:
        super().__init__(store, config, clock=clock, timeout=timeout, debug=debug)

    @staticmethod
    def key(client_identity: str) -> str:
        return f"{_KEY_PREFIX}:{client_identity}"

    async def check_and_consume(self, client_identity: str, *, debug: bool = False) -> bool:
        """Count one request for *client_identity* and return whether it is allowed.

        Denied requests are not counted.  Store failures allow the request.
        """
        debug = debug or self.debug
        if self.store is None:
            debug_log(logger, "Rate limiting disabled - no store configured", None, debug)
            return True

        key = self.key(client_identity)
        max_requests = self.config.max_requests
        if max_requests == 0:
            debug_log(
                logger,
                "Rate limit exceeded",
                {"key": key, "count": 0, "max_requests": 0},
                debug,
            )
            return False

        now = self._now_ms()
        window_ms = self.config.window_seconds * 1000

        try:
            window = RateWindow.parse(await self._call(self.store.get(key)))

            if window is None or now - window.window_start > window_ms:
                fresh = RateWindow(count=1, window_start=now)
                await self._call(
                    self.store.put(key, fresh.dump(), ttl_seconds=self.config.window_seconds)
                )
                debug_log(
                    logger,
                    "Rate limit: new window" if window is None else "Rate limit: window expired, reset",
                    {"key": key, "count": 1, "max_requests": max_requests},
                    debug,
                )
                return True

            if window.count >= max_requests:
                debug_log(
                    logger,
                    "Rate limit exceeded",
                    {"key": key, "count": window.count, "max_requests": max_requests},
                    debug,
                )
                return False

            # Expiry is decided by window_start; the TTL only reclaims the record.
            updated = RateWindow(count=window.count + 1, window_start=window.window_start)
            await self._call(
                self.store.put(key, updated.dump(), ttl_seconds=self.config.window_seconds)
            )
            debug_log(
                logger,
                "Rate limit: incremented",
                {"key": key, "count": updated.count, "max_requests": max_requests},
                debug,
            )
            return True

        except Exception as exc:
            self._log_store_failure("check_and_consume", exc)
            debug_log(logger, "Rate limit check failed, allowing request", {"key": key}, debug)
            return True
