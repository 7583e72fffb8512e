"""Rate limit signals and quota snapshots for REST APIs.

This module decides how long to back off after a throttled response and
parses GitHub's /rate_limit endpoint for reporting.
"""

from .schemas import (
    RATE_LIMIT_STATUSES,
    BackoffReason,
    PoolRateLimit,
    RateLimitPool,
    RateLimitSignal,
    RateLimitSnapshot,
    RateLimitStatus,
)

__all__ = [
    "RATE_LIMIT_STATUSES",
    "BackoffReason",
    "PoolRateLimit",
    "RateLimitPool",
    "RateLimitSignal",
    "RateLimitSnapshot",
    "RateLimitStatus",
]
