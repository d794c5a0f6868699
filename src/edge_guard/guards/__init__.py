"""Store-backed guards: rate limiting, brute-force lockout, and response caching."""

from edge_guard.guards.base import Guard
from edge_guard.guards.cache import ResponseCache
from edge_guard.guards.lockout import LockoutGuard
from edge_guard.guards.rate_limit import RateLimiter

__all__ = [
    "Guard",
    "LockoutGuard",
    "RateLimiter",
    "ResponseCache",
]
