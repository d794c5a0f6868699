"""Guard ABC — shared plumbing for the store-backed defenses."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from pydantic import BaseModel

from edge_guard._internal.clock import Clock, SystemClock
from edge_guard.exceptions import GuardConfigError

if TYPE_CHECKING:
    from edge_guard.stores.base import KeyValueStore

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Guard(ABC):
    """Base class for every guard.

    A guard owns one key namespace in a shared :class:`KeyValueStore` and
    turns store reads and writes into an allow/deny style decision.

    The store is optional.  When it is ``None`` every operation returns its
    permissive result without doing any I/O, which is how deployments run
    with protection switched off.  When it is present but failing, the
    same permissive result is returned and the failure is logged: guards
    never raise for store problems.

    Parameters:
        store:   Shared key-value store, or ``None`` to disable the guard.
        clock:   Injectable clock for testing.
        timeout: Upper bound in seconds on each store call (``None`` = unbounded).
        debug:   Emit structured decision events on every call.

    Class Variables:
        _guard_type:        Type identifier used in :meth:`export`.
        _guard_description: Human-readable description of the guard.
        _config_class:      Config model the constructor accepts.
    """

    _guard_type: ClassVar[str] = "base"
    _guard_description: ClassVar[str] = ""
    _config_class: ClassVar[type[BaseModel]]

    def __init__(
        self,
        store: KeyValueStore | None,
        config: BaseModel | None = None,
        *,
        clock: Clock | None = None,
        timeout: float | None = None,
        debug: bool = False,
    ) -> None:
        if config is None:
            config = self._config_class()
        if not isinstance(config, self._config_class):
            raise GuardConfigError(
                self._guard_type,
                f"expected {self._config_class.__name__}, got {type(config).__name__}",
            )
        if timeout is not None and timeout <= 0:
            raise GuardConfigError(self._guard_type, "timeout must be positive")
        self.store = store
        self.config = config
        self.timeout = timeout
        self.debug = debug
        self._clock = clock or SystemClock()

    @property
    def enabled(self) -> bool:
        return self.store is not None

    def _now_ms(self) -> int:
        return self._clock.now_ms()

    async def _call(self, operation: Awaitable[T]) -> T:
        """Await a store operation, bounded by ``self.timeout`` when set."""
        if self.timeout is None:
            return await operation
        return await asyncio.wait_for(operation, self.timeout)

    def _log_store_failure(self, action: str, exc: BaseException) -> None:
        logger.error(
            "%s store failure during %s: %s",
            self._guard_type,
            action,
            str(exc) or type(exc).__name__,
            extra={"guard": self._guard_type, "action": action},
        )

    # ── introspection ─────────────────────────────────────────

    def export(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of this guard."""
        return {
            "type": self._guard_type,
            "description": self._guard_description,
            "enabled": self.enabled,
            "timeout": self.timeout,
            "config": self.config.model_dump(),
        }
