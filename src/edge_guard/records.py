"""Persisted record shapes.

Each guard stores one small JSON object per key.  Field names on the wire
are camelCase and must stay stable: other readers may share the store.
Timestamps are epoch milliseconds.
"""

from __future__ import annotations

import logging
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def parse(cls, raw: Any) -> Self | None:
        """Validate a stored value, returning ``None`` if it is absent or malformed."""
        if raw is None:
            return None
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            logger.warning(
                "Discarding malformed %s record (%d errors)", cls.__name__, exc.error_count()
            )
            return None

    def dump(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class RateWindow(_Record):
    """Requests seen from one client identity since ``window_start``."""

    count: int = Field(ge=0)
    window_start: int = Field(alias="windowStart", ge=0)


class LockoutState(_Record):
    """Consecutive authentication failures for one account identity."""

    failed_attempts: int = Field(alias="failedAttempts", ge=0)
    last_failure: int = Field(alias="lastFailure", ge=0)
    locked_until: int | None = Field(default=None, alias="lockedUntil")

    def is_locked_at(self, now_ms: int) -> bool:
        return self.locked_until is not None and now_ms < self.locked_until


class CacheEntry(_Record):
    """Last known-good value for one cache identity."""

    value: str
    cached_at: int = Field(alias="cachedAt", ge=0)
