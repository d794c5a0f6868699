"""LockoutGuard — brute-force protection by consecutive-failure lockout."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from edge_guard.config import LockoutConfig
from edge_guard.guards.base import Guard
from edge_guard.logging import debug_log, mask_sensitive
from edge_guard.records import LockoutState

if TYPE_CHECKING:
    from edge_guard._internal.clock import Clock
    from edge_guard.stores.base import KeyValueStore

logger = logging.getLogger(__name__)

_KEY_PREFIX = "lockout"


class LockoutGuard(Guard):
    """Locks an account identity after too many consecutive failed logins.

    Per identity the state moves through::

        Unknown ──failure──▶ Tracking(1) ──failure──▶ ... ──failure──▶ Locked(until)
        Locked(until) ──now ≥ until, failure──▶ Tracking(1)
        any state ──success──▶ Unknown

    ``Unknown`` is also reached when the store expires the record, which
    happens ``2 × lockout_seconds`` after the last failure.

    Failures arriving while the account is already locked keep counting
    and push ``locked_until`` forward from the latest failure.

    Parameters:
        store:   Shared key-value store, or ``None`` to never lock.
        config:  Failure threshold and lock duration.
        clock:   Injectable clock for testing.
        timeout: Upper bound in seconds on each store call.
        debug:   Emit decision events on every call.
    """

    _guard_type = "lockout"
    _guard_description = "Locks an account after repeated authentication failures"
    _config_class = LockoutConfig

    config: LockoutConfig

    def __init__(
        self,
        store: KeyValueStore | None,
        config: LockoutConfig | None = None,
        *,
        clock: Clock | None = None,
        timeout: float | None = None,
        debug: bool = False,
    ) -> None:
        super().__init__(store, config, clock=clock, timeout=timeout, debug=debug)

    @staticmethod
    def key(identity: str) -> str:
        return f"{_KEY_PREFIX}:{identity}"

    async def _load(self, store: KeyValueStore, identity: str) -> LockoutState | None:
        return LockoutState.parse(await self._call(store.get(self.key(identity))))

    # ── queries ──────────────────────────────────────────────

    async def is_locked(self, identity: str, *, debug: bool = False) -> bool:
        """Return ``True`` while *identity* is inside an active lock window.

        An expired lock reads as unlocked; the record is left for
        :meth:`record_failure` to restart from.
        """
        debug = debug or self.debug
        if self.store is None:
            debug_log(logger, "Lockout protection disabled - no store configured", None, debug)
            return False

        try:
            state = await self._load(self.store, identity)
        except Exception as exc:
            self._log_store_failure("is_locked", exc)
            debug_log(
                logger,
                "Lockout check failed, allowing request",
                {"identity": mask_sensitive(identity)},
                debug,
            )
            return False

        if state is None:
            return False

        remaining = _remaining_seconds(state, self._now_ms())
        if remaining > 0:
            debug_log(
                logger,
                "Account is locked",
                {
                    "identity": mask_sensitive(identity),
                    "failed_attempts": state.failed_attempts,
                    "remaining_seconds": remaining,
                },
                debug,
            )
            return True
        return False

    async def remaining_lockout_seconds(self, identity: str, *, debug: bool = False) -> int:
        """Whole seconds (rounded up) until *identity* unlocks, or 0 if it is not locked."""
        debug = debug or self.debug
        if self.store is None:
            return 0
        try:
            state = await self._load(self.store, identity)
        except Exception as exc:
            self._log_store_failure("remaining_lockout_seconds", exc)
            return 0

        if state is None:
            return 0
        remaining = _remaining_seconds(state, self._now_ms())
        debug_log(
            logger,
            "Lockout remaining",
            {"identity": mask_sensitive(identity), "remaining_seconds": remaining},
            debug,
        )
        return remaining

    # ── transitions ──────────────────────────────────────────

    async def record_failure(self, identity: str, *, debug: bool = False) -> bool:
        """Record one failed authentication and return whether the account is now locked.

        Store failures leave the attempt unrecorded and return ``False``.
        """
        debug = debug or self.debug
        if self.store is None:
            return False

        key = self.key(identity)
        now = self._now_ms()

        try:
            state = await self._load(self.store, identity)

            if state is None or (state.locked_until is not None and now >= state.locked_until):
                failed_attempts = 1
                locked_until = None
            else:
                failed_attempts = state.failed_attempts + 1
                locked_until = state.locked_until

            if failed_attempts >= self.config.max_attempts:
                locked_until = now + self.config.lockout_seconds * 1000
                debug_log(
                    logger,
                    "Account locked due to failed attempts",
                    {
                        "identity": mask_sensitive(identity),
                        "failed_attempts": failed_attempts,
                        "lockout_seconds": self.config.lockout_seconds,
                    },
                    debug,
                )

            updated = LockoutState(
                failed_attempts=failed_attempts,
                last_failure=now,
                locked_until=locked_until,
            )
            await self._call(
                self.store.put(key, updated.dump(), ttl_seconds=self.config.retention_seconds)
            )
        except Exception as exc:
            self._log_store_failure("record_failure", exc)
            return False

        locked = updated.is_locked_at(now)
        debug_log(
            logger,
            "Failed attempt recorded",
            {
                "identity": mask_sensitive(identity),
                "failed_attempts": updated.failed_attempts,
                "is_locked": locked,
            },
            debug,
        )
        return locked

    async def clear_on_success(self, identity: str, *, debug: bool = False) -> None:
        """Forget all failures for *identity*.  Call only after a verified login."""
        debug = debug or self.debug
        if self.store is None:
            return

        try:
            await self._call(self.store.delete(self.key(identity)))
        except Exception as exc:
            self._log_store_failure("clear_on_success", exc)
            return
        debug_log(logger, "Cleared failed attempts", {"identity": mask_sensitive(identity)}, debug)


def _remaining_seconds(state: LockoutState, now_ms: int) -> int:
    """Seconds (rounded up) left on an active lock, 0 once it has expired or if none is set."""
    if state.locked_until is None or now_ms >= state.locked_until:
        return 0
    return math.ceil((state.locked_until - now_ms) / 1000)
