"""edge_guard — a shared, fail-open defense layer for edge services.

Three guards share one TTL key-value store: a per-client rate limiter, a
per-account brute-force lockout, and a short-lived response cache.  Store
outages degrade protection; they never fail the request.
"""

from edge_guard.config import CacheConfig, GuardSettings, LockoutConfig, RateLimitConfig
from edge_guard.exceptions import GuardConfigError, GuardError, StoreError
from edge_guard.guards import LockoutGuard, RateLimiter, ResponseCache
from edge_guard.identity import client_ip
from edge_guard.manager import EdgeGuard

__all__ = [
    "CacheConfig",
    "EdgeGuard",
    "GuardConfigError",
    "GuardError",
    "GuardSettings",
    "LockoutConfig",
    "LockoutGuard",
    "RateLimitConfig",
    "RateLimiter",
    "ResponseCache",
    "StoreError",
    "client_ip",
]
