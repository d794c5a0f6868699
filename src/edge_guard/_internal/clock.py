"""Clock abstraction for testable time-dependent logic."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Protocol for getting the current wall-clock time in milliseconds.  Inject a fake in tests."""

    def now_ms(self) -> int: ...


class SystemClock:
    """Default clock backed by the real system time."""

    def now_ms(self) -> int:
        return int(datetime.now(UTC).timestamp() * 1000)
