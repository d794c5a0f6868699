"""Best-effort JSON value codec used by the serializing store backends."""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def encode(value: Any) -> str:
    """Serialize *value* to compact JSON.  Raises ``TypeError`` for non-JSON values."""
    return json.dumps(value, separators=(",", ":"))


def decode(raw: str | bytes | None) -> Any | None:
    """Parse stored JSON, returning ``None`` for absent or unparseable data.

    A corrupt value reads as absent so that the owning guard starts fresh
    and the next write overwrites it.
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Discarding stored value that is not valid UTF-8")
            return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding stored value that is not valid JSON")
        return None
