"""EdgeGuard — wires the three guards to their stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from edge_guard.config import GuardSettings
from edge_guard.guards.cache import ResponseCache
from edge_guard.guards.lockout import LockoutGuard
from edge_guard.guards.rate_limit import RateLimiter

if TYPE_CHECKING:
    from edge_guard._internal.clock import Clock
    from edge_guard.stores.base import KeyValueStore


class EdgeGuard:
    """Holds the rate limiter, lockout guard, and response cache for one deployment.

    The guards never call each other; request handlers sequence them::

        if not await guard.rate_limiter.check_and_consume(ip): ...   # 429
        if await guard.lockout.is_locked(username): ...              # 429
        ok = await authenticate(...)
        if ok:
            await guard.lockout.clear_on_success(username)
        else:
            await guard.lockout.record_failure(username)

    Parameters:
        security_store: Store for rate-limit and lockout state.  ``None``
                        disables both.
        cache_store:    Store for cached responses.  ``None`` disables caching.
        settings:       Limits and timeouts.  Read from the environment when omitted.
        clock:          Injectable clock shared by all three guards.
    """

    def __init__(
        self,
        security_store: KeyValueStore | None = None,
        cache_store: KeyValueStore | None = None,
        settings: GuardSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._settings = settings or GuardSettings()
        timeout = self._settings.store_timeout_seconds
        debug = self._settings.debug

        self.rate_limiter = RateLimiter(
            security_store,
            self._settings.rate_limit(),
            clock=clock,
            timeout=timeout,
            debug=debug,
        )
        self.lockout = LockoutGuard(
            security_store,
            self._settings.lockout(),
            clock=clock,
            timeout=timeout,
            debug=debug,
        )
        self.cache = ResponseCache(
            cache_store,
            self._settings.cache(),
            clock=clock,
            timeout=timeout,
            debug=debug,
        )

    @classmethod
    def from_settings(
        cls,
        settings: GuardSettings,
        *,
        security_store: KeyValueStore | None = None,
        cache_store: KeyValueStore | None = None,
        clock: Clock | None = None,
    ) -> EdgeGuard:
        return cls(
            security_store=security_store,
            cache_store=cache_store,
            settings=settings,
            clock=clock,
        )

    @property
    def settings(self) -> GuardSettings:
        return self._settings

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of every guard."""
        return {
            "guards": [
                self.rate_limiter.export(),
                self.lockout.export(),
                self.cache.export(),
            ],
            "debug": self._settings.debug,
        }
