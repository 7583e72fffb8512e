"""Test fixtures for dev-activity."""

from .rate_limit_responses import (
    RATE_LIMIT_RESPONSE_EXHAUSTED,
    RATE_LIMIT_RESPONSE_HEALTHY,
    bare_throttle_response,
    future_reset_timestamp,
    primary_limit_response,
    retry_after_response,
)

__all__ = [
    # GET /rate_limit bodies
    "RATE_LIMIT_RESPONSE_EXHAUSTED",
    "RATE_LIMIT_RESPONSE_HEALTHY",
    # Throttled responses
    "bare_throttle_response",
    "future_reset_timestamp",
    "primary_limit_response",
    "retry_after_response",
]
