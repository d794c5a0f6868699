"""Guard configuration.

Per-guard settings are small frozen pydantic models, validated when they
are built so that misuse (negative limits, zero-length windows) fails at
startup rather than inside a request.  :class:`GuardSettings` reads the
same values from the environment.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RATE_LIMIT_REQUESTS = 10
DEFAULT_RATE_LIMIT_WINDOW_SECONDS = 60
DEFAULT_BRUTE_FORCE_MAX_ATTEMPTS = 5
DEFAULT_BRUTE_FORCE_LOCKOUT_SECONDS = 900  # 15 minutes
DEFAULT_CACHE_TTL_SECONDS = 30
DEFAULT_CACHE_PREFIX = "balance"


class RateLimitConfig(BaseModel):
    """Fixed-window rate limit.

    Attributes:
        max_requests:   Requests allowed per window.  ``0`` denies everything.
        window_seconds: Window length, measured from the first request of the window.
    """

    model_config = ConfigDict(frozen=True)

    max_requests: int = Field(default=DEFAULT_RATE_LIMIT_REQUESTS, ge=0)
    window_seconds: int = Field(default=DEFAULT_RATE_LIMIT_WINDOW_SECONDS, gt=0)


class LockoutConfig(BaseModel):
    """Brute-force lockout.

    Attributes:
        max_attempts:    Consecutive failures that trip the lock (at least 1).
        lockout_seconds: How long a tripped lock lasts.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=DEFAULT_BRUTE_FORCE_MAX_ATTEMPTS, ge=1)
    lockout_seconds: int = Field(default=DEFAULT_BRUTE_FORCE_LOCKOUT_SECONDS, gt=0)

    @property
    def retention_seconds(self) -> int:
        return self.lockout_seconds * 2


class CacheConfig(BaseModel):
    """Response cache.

    Attributes:
        freshness_seconds: Maximum age of a value that may still be served.
        prefix:            Key namespace, e.g. ``"balance"`` → ``balance:<identity>``.
    """

    model_config = ConfigDict(frozen=True)

    freshness_seconds: int = Field(default=DEFAULT_CACHE_TTL_SECONDS, gt=0)
    prefix: str = Field(default=DEFAULT_CACHE_PREFIX, min_length=1)

    @property
    def retention_seconds(self) -> int:
        return self.freshness_seconds * 2


class GuardSettings(BaseSettings):
    """Environment-driven settings for :class:`~edge_guard.manager.EdgeGuard`.

    Variable names match the gateway's deployment environment
    (``RATE_LIMIT_REQUESTS``, ``BRUTE_FORCE_LOCKOUT_SECONDS``, ...).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    rate_limit_requests: int = Field(default=DEFAULT_RATE_LIMIT_REQUESTS, ge=0)
    rate_limit_window_seconds: int = Field(default=DEFAULT_RATE_LIMIT_WINDOW_SECONDS, gt=0)
    brute_force_max_attempts: int = Field(default=DEFAULT_BRUTE_FORCE_MAX_ATTEMPTS, ge=1)
    brute_force_lockout_seconds: int = Field(default=DEFAULT_BRUTE_FORCE_LOCKOUT_SECONDS, gt=0)
    cache_ttl_seconds: int = Field(default=DEFAULT_CACHE_TTL_SECONDS, gt=0)
    cache_prefix: str = Field(default=DEFAULT_CACHE_PREFIX, min_length=1)
    store_timeout_seconds: float | None = Field(default=None, gt=0)
    debug: bool = False

    def rate_limit(self) -> RateLimitConfig:
        return RateLimitConfig(
            max_requests=self.rate_limit_requests,
            window_seconds=self.rate_limit_window_seconds,
        )

    def lockout(self) -> LockoutConfig:
        return LockoutConfig(
            max_attempts=self.brute_force_max_attempts,
            lockout_seconds=self.brute_force_lockout_seconds,
        )

    def cache(self) -> CacheConfig:
        return CacheConfig(
            freshness_seconds=self.cache_ttl_seconds,
            prefix=self.cache_prefix,
        )
