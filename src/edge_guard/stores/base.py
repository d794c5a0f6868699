"""Store protocol — TTL-capable key-value persistence shared by all guards."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Abstract base for all storage backends.

    Each guard owns a key *prefix* (``"rate:"``, ``"lockout:"``, ...).  The
    store is agnostic to what is being stored: values are JSON-compatible
    objects, and every write may carry a time-to-live after which the key
    disappears on its own.

    There is no compare-and-swap or atomic increment.  Guards do a plain
    read followed by a plain write, so concurrent writers to one key can
    lose updates.

    Any method may raise; callers decide how to degrade.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the stored value, or ``None`` if not found or expired."""
        ...

    @abstractmethod
    async def put(self, key: str, value: Any, *, ttl_seconds: int | None = None) -> None:
        """Create or overwrite a value.  ``ttl_seconds=None`` means no expiry."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value.  No-op if the key does not exist."""
        ...

    async def close(self) -> None:
        """Release backend resources.  The default does nothing."""
        return None
