"""Rate limit fixtures: throttled response headers and GET /rate_limit bodies.

See: https://docs.github.com/en/rest/using-the-rest-api/rate-limits-for-the-rest-api
"""

import time

import httpx


def future_reset_timestamp(seconds_from_now: int = 3600) -> int:
    """Generate a Unix timestamp for reset time in the future."""
    return int(time.time()) + seconds_from_now


# -----------------------------------------------------------------------------
# Throttled responses (403/429)
# -----------------------------------------------------------------------------
def primary_limit_response(reset: int, status: int = 403) -> httpx.Response:
    """Quota exhausted: remaining is "0" and the reset epoch is known."""
    return httpx.Response(
        status,
        headers={
            "x-ratelimit-limit": "5000",
            "x-ratelimit-remaining": "0",
            "x-ratelimit-reset": str(reset),
        },
        json={"message": "API rate limit exceeded"},
    )


def retry_after_response(seconds: int | str, status: int = 429) -> httpx.Response:
    """Secondary limit with an explicit retry-after."""
    return httpx.Response(
        status,
        headers={"retry-after": str(seconds)},
        json={"message": "You have exceeded a secondary rate limit"},
    )


def bare_throttle_response(status: int = 403) -> httpx.Response:
    """Throttled response carrying no rate limit headers."""
    return httpx.Response(status, json={"message": "Forbidden"})


# -----------------------------------------------------------------------------
# Full Rate Limit API Response (GET /rate_limit)
# -----------------------------------------------------------------------------
RATE_LIMIT_RESPONSE_HEALTHY = {
    "resources": {
        "core": {
            "limit": 5000,
            "remaining": 4500,
            "used": 500,
            "reset": future_reset_timestamp(3600),
        },
        "search": {
            "limit": 30,
            "remaining": 28,
            "used": 2,
            "reset": future_reset_timestamp(60),
        },
        "graphql": {
            "limit": 5000,
            "remaining": 4800,
            "used": 200,
            "reset": future_reset_timestamp(3600),
        },
        "integration_manifest": {
            "limit": 5000,
            "remaining": 5000,
            "used": 0,
            "reset": future_reset_timestamp(3600),
        },
    },
    "rate": {
        "limit": 5000,
        "remaining": 4500,
        "used": 500,
        "reset": future_reset_timestamp(3600),
    },
}

# Core pool used up; search still available
RATE_LIMIT_RESPONSE_EXHAUSTED = {
    "resources": {
        "core": {
            "limit": 5000,
            "remaining": 0,
            "used": 5000,
            "reset": future_reset_timestamp(600),
        },
        "search": {
            "limit": 30,
            "remaining": 5,
            "used": 25,
            "reset": future_reset_timestamp(60),
        },
    },
}
