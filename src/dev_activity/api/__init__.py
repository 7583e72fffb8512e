"""REST API client module.

This module provides:
- ResilientApiClient: Async client with rate-limit backoff and pagination
- Outcomes: JsonPayload, SkipOutcome
- Rate limit parsing: RateLimitSignal, RateLimitSnapshot, etc.
- Activity services: GitHubActivityService, GitLabActivityService
"""

from .client import (
    GITHUB_COMMIT_SEARCH,
    GITHUB_JSON,
    RequestDescriptor,
    RequestStats,
    ResilientApiClient,
    github_client,
    gitlab_client,
)
from .exceptions import (
    ApiAuthenticationError,
    ApiClientError,
    ApiHttpError,
    ApiRateLimitError,
    ApiResponseError,
    ApiRetryableError,
    ApiTimeoutError,
    ApiTransportError,
)
from .github import GitHubActivityService
from .gitlab import GitLabActivityService, PushedProjects
from .outcomes import FetchOutcome, JsonPayload, SkipOutcome
from .rate_limit import (
    BackoffReason,
    PoolRateLimit,
    RateLimitPool,
    RateLimitSignal,
    RateLimitSnapshot,
    RateLimitStatus,
)

__all__ = [
    # Client
    "GITHUB_COMMIT_SEARCH",
    "GITHUB_JSON",
    "RequestDescriptor",
    "RequestStats",
    "ResilientApiClient",
    "github_client",
    "gitlab_client",
    # Exceptions
    "ApiAuthenticationError",
    "ApiClientError",
    "ApiHttpError",
    "ApiRateLimitError",
    "ApiResponseError",
    "ApiRetryableError",
    "ApiTimeoutError",
    "ApiTransportError",
    # Outcomes
    "FetchOutcome",
    "JsonPayload",
    "SkipOutcome",
    # Rate limits
    "BackoffReason",
    "PoolRateLimit",
    "RateLimitPool",
    "RateLimitSignal",
    "RateLimitSnapshot",
    "RateLimitStatus",
    # Services
    "GitHubActivityService",
    "GitLabActivityService",
    "PushedProjects",
]
