"""Pydantic schemas for GitHub rate limit data.

These schemas represent rate limit information from:
- x-ratelimit-* / retry-after headers on a throttled response
- GET /rate_limit API endpoint
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, Field, computed_field

RATE_LIMIT_STATUSES = frozenset({403, 429})


class RateLimitPool(StrEnum):
    """GitHub rate limit resource pools.

    Each pool has its own separate quota. Commit search uses 'search'.
    See: https://docs.github.com/en/rest/rate-limit/rate-limit
    """

    CORE = "core"
    SEARCH = "search"
    GRAPHQL = "graphql"
    CODE_SEARCH = "code_search"


class RateLimitStatus(StrEnum):
    """Rate limit health status.

    Defaults:
    - HEALTHY: > 50% remaining
    - WARNING: 20-50% remaining
    - CRITICAL: below 20% remaining
    - EXHAUSTED: 0 remaining
    """

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EXHAUSTED = "exhausted"


class BackoffReason(StrEnum):
    """Which header (if any) determined a rate-limit wait."""

    RESET = "reset"
    RETRY_AFTER = "retry_after"
    EXPONENTIAL = "exponential"


class RateLimitSignal(BaseModel):
    """Rate limit guidance extracted from a single 403/429 response.

    Header values are kept as the raw strings the server sent so that the
    primary-limit check compares ``remaining`` to ``"0"`` exactly.
    """

    status: int = Field(description="HTTP status of the throttled response")
    remaining: str | None = Field(default=None, description="x-ratelimit-remaining")
    reset: str | None = Field(default=None, description="x-ratelimit-reset (epoch seconds)")
    retry_after: str | None = Field(default=None, description="retry-after (seconds)")

    @classmethod
    def from_response(cls, status: int, headers: Mapping[str, str]) -> Self:
        """Build a signal from a response's status and headers.

        Args:
            status: HTTP status code (expected 403 or 429)
            headers: Response headers; lookups are case-insensitive when an
                ``httpx.Headers`` is passed, lowercase keys otherwise
        """
        return cls(
            status=status,
            remaining=headers.get("x-ratelimit-remaining"),
            reset=headers.get("x-ratelimit-reset"),
            retry_after=headers.get("retry-after"),
        )

    @property
    def reset_epoch(self) -> int | None:
        return _parse_int(self.reset)

    @property
    def retry_after_seconds(self) -> float | None:
        if self.retry_after is None:
            return None
        try:
            value = float(self.retry_after)
        except ValueError:
            return None
        return max(value, 0.0)

    @property
    def is_primary_exhausted(self) -> bool:
        """True when the hourly quota is used up and a reset time is known."""
        return self.remaining == "0" and self.reset_epoch is not None

    def backoff(self, retry_count: int, now: float) -> tuple[float, BackoffReason]:
        """Compute how long to wait before the next attempt.

        Precedence: exhausted quota with a reset time, then ``retry-after``,
        then exponential backoff of ``2 ** (retry_count + 1)`` seconds.

        Args:
            retry_count: Retries already made for this logical call
            now: Current time as epoch seconds

        Returns:
            Tuple of (seconds to wait, reason)
        """
        reset = self.reset_epoch
        if self.remaining == "0" and reset is not None:
            return float(max(reset - int(now), 1)), BackoffReason.RESET

        retry_after = self.retry_after_seconds
        if retry_after is not None:
            return retry_after, BackoffReason.RETRY_AFTER

        return float(2 ** (retry_count + 1)), BackoffReason.EXPONENTIAL


class PoolRateLimit(BaseModel):
    """Rate limit information for a single resource pool."""

    pool: RateLimitPool = Field(description="Resource pool name")
    limit: int = Field(ge=0, description="Maximum requests allowed per window")
    remaining: int = Field(ge=0, description="Requests remaining in current window")
    used: int = Field(ge=0, description="Requests used in current window")
    reset_at: datetime = Field(description="UTC datetime when limit resets")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def usage_percent(self) -> float:
        """Percentage of rate limit consumed (0.0 to 100.0)."""
        if self.limit == 0:
            return 100.0
        return (self.used / self.limit) * 100

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_percent(self) -> float:
        """Percentage of rate limit remaining (0.0 to 100.0)."""
        return 100.0 - self.usage_percent

    @property
    def seconds_until_reset(self) -> int:
        """Seconds until rate limit resets (0 if already past)."""
        delta = self.reset_at - datetime.now(UTC)
        return max(0, int(delta.total_seconds()))

    def get_status(
        self,
        healthy_threshold: float = 50.0,
        warning_threshold: float = 20.0,
    ) -> RateLimitStatus:
        """Determine rate limit health status.

        Args:
            healthy_threshold: % remaining above which is HEALTHY
            warning_threshold: % remaining above which is WARNING (below healthy)
        """
        if self.remaining == 0:
            return RateLimitStatus.EXHAUSTED
        if self.remaining_percent >= healthy_threshold:
            return RateLimitStatus.HEALTHY
        if self.remaining_percent >= warning_threshold:
            return RateLimitStatus.WARNING
        return RateLimitStatus.CRITICAL


class RateLimitSnapshot(BaseModel):
    """Point-in-time view of all rate limit pools from GET /rate_limit."""

    timestamp: datetime = Field(description="When this snapshot was taken")
    pools: dict[RateLimitPool, PoolRateLimit] = Field(
        default_factory=dict, description="Rate limits by pool"
    )

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Self:
        """Parse from GitHub /rate_limit API response.

        Args:
            data: Raw API response dict with 'resources' key
        """
        pools: dict[RateLimitPool, PoolRateLimit] = {}
        resources = data.get("resources", {})

        for pool in RateLimitPool:
            if pool.value in resources:
                r = resources[pool.value]
                pools[pool] = PoolRateLimit(
                    pool=pool,
                    limit=r["limit"],
                    remaining=r["remaining"],
                    used=r["used"],
                    reset_at=datetime.fromtimestamp(r["reset"], tz=UTC),
                )

        return cls(timestamp=datetime.now(UTC), pools=pools)

    def get_pool(self, pool: RateLimitPool) -> PoolRateLimit | None:
        return self.pools.get(pool)

    def get_core(self) -> PoolRateLimit | None:
        """Convenience accessor for core pool (most common)."""
        return self.pools.get(RateLimitPool.CORE)


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
