"""Storage backends for guard state persistence.

``SQLiteStore`` and ``RedisStore`` need optional extras and are imported
from their own modules.
"""

from edge_guard.stores.base import KeyValueStore
from edge_guard.stores.memory import InMemoryStore

__all__ = ["InMemoryStore", "KeyValueStore"]
