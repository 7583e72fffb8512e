"""Async REST client with rate-limit backoff and pagination.

This module provides the single HTTP entry point used by the GitHub and
GitLab activity services. Every logical call is a bounded retry loop:
throttled responses (403/429) are waited out according to the response
headers and reissued, 409 resolves to a skip sentinel, and every other
failure is raised to the caller.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from contextlib import aclosing
from dataclasses import dataclass, field
from itertools import count
from typing import Any

import httpx

from dev_activity.config import ApiClientConfig, Settings, get_settings
from dev_activity.logging import get_logger

from .exceptions import (
    ApiAuthenticationError,
    ApiHttpError,
    ApiRateLimitError,
    ApiResponseError,
    ApiTimeoutError,
    ApiTransportError,
)
from .outcomes import FetchOutcome, JsonPayload, SkipOutcome
from .rate_limit import RATE_LIMIT_STATUSES, RateLimitSignal, RateLimitSnapshot

logger = get_logger(__name__)

GITHUB_JSON = "application/vnd.github.v3+json"
GITHUB_COMMIT_SEARCH = "application/vnd.github.cloak-preview"

SleepFunc = Callable[[float], Awaitable[Any]]
ClockFunc = Callable[[], float]
StopPredicate = Callable[[list[Any], list[Any]], bool]


@dataclass
class RequestStats:
    """Counters for one client's lifetime, reported alongside results."""

    requests: int = 0
    """HTTP requests issued (every attempt counts, retries included)."""

    rate_limited: int = 0
    """Responses classified as rate limited (403/429)."""

    waited_seconds: float = 0.0
    """Total time spent in backoff waits."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "requests": self.requests,
            "rate_limited": self.rate_limited,
            "waited_seconds": round(self.waited_seconds, 2),
        }


@dataclass
class RequestDescriptor:
    """One logical GET call. Only ``retry_count`` changes between attempts."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout_ms: int = 20000
    method: str = "GET"
    retry_count: int = 0


class ResilientApiClient:
    """Async REST client for JSON APIs that throttle with 403/429.

    Usage:
        async with github_client() as client:
            repos = await client.paginate(
                "/users/octocat/repos?per_page={per_page}&page={page}"
            )

    Calls are issued one at a time; the client never fans out requests.
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        *,
        base_url: str = "",
        config: ApiClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFunc | None = None,
        clock: ClockFunc | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            headers: Header set sent with every request (authorization, Accept)
            base_url: Prefix for relative URLs passed to fetch_json/paginate
            config: Timeout and retry bounds (uses settings if not provided)
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
            sleep: Coroutine used for backoff waits (default asyncio.sleep)
            clock: Epoch-seconds clock used for reset computations (default time.time)
        """
        self._headers = dict(headers)
        self._base_url = base_url.rstrip("/")
        self._config = config or get_settings().api
        self._transport = transport
        self._sleep: SleepFunc = sleep or asyncio.sleep
        self._clock: ClockFunc = clock or time.time
        self._client: httpx.AsyncClient | None = None
        self.stats = RequestStats()

    @property
    def _http(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    @property
    def config(self) -> ApiClientConfig:
        return self._config

    @property
    def request_count(self) -> int:
        """Total HTTP requests issued by this client."""
        return self.stats.requests

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ResilientApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    def resolve(self, url: str) -> str:
        """Return an absolute URL, prefixing relative paths with the base URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}/{url.lstrip('/')}"

    # -------------------------------------------------------------------------
    # Single call
    # -------------------------------------------------------------------------
    async def fetch_json(
        self,
        url: str,
        *,
        timeout_ms: int | None = None,
        accept: str | None = None,
        retry_count: int = 0,
    ) -> FetchOutcome:
        """GET a URL and return its JSON body or the skip sentinel.

        Args:
            url: Absolute URL, or a path relative to the base URL
            timeout_ms: Per-attempt timeout (default from config, 20000 ms)
            accept: Accept header for this call only (e.g. commit search preview)
            retry_count: Retries already spent on this logical call

        Returns:
            JsonPayload for 2xx responses, SkipOutcome for 409

        Raises:
            ApiRateLimitError: Still throttled after max_retries retries
            ApiHttpError: Any other non-2xx response (never retried)
            ApiTimeoutError: No response within timeout_ms (never retried)
            ApiTransportError: Connection failure (never retried)
            ApiResponseError: 2xx body that is not valid JSON
        """
        headers = dict(self._headers)
        if accept is not None:
            headers["Accept"] = accept
        request = RequestDescriptor(
            url=self.resolve(url),
            headers=headers,
            timeout_ms=timeout_ms if timeout_ms is not None else self._config.timeout_ms,
            retry_count=retry_count,
        )

        while True:
            response = await self._send(request)
            status = response.status_code

            if status in RATE_LIMIT_STATUSES:
                await self._back_off(request, response)
                continue

            if status == 409:
                logger.debug("Skip outcome (409) for {}", request.url)
                return SkipOutcome(url=request.url)

            if not response.is_success:
                raise ApiHttpError(request.url, status, response.text)

            return JsonPayload(
                data=self._parse_body(request.url, response),
                status=status,
                link=response.headers.get("link"),
                url=request.url,
            )

    async def _send(self, request: RequestDescriptor) -> httpx.Response:
        """Issue one attempt, converting transport failures to client errors."""
        timeout = request.timeout_ms / 1000
        self.stats.requests += 1
        logger.debug(
            "GET {} (attempt {}, request #{})",
            request.url,
            request.retry_count + 1,
            self.stats.requests,
        )
        try:
            async with asyncio.timeout(timeout):
                return await self._http.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    timeout=timeout,
                )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise ApiTimeoutError(
                f"No response from {request.url} within {request.timeout_ms} ms",
                url=request.url,
            ) from e
        except httpx.TransportError as e:
            raise ApiTransportError(f"Request to {request.url} failed: {e}", url=request.url) from e

    async def _back_off(self, request: RequestDescriptor, response: httpx.Response) -> None:
        """Wait out a throttled response, or raise once retries are exhausted."""
        signal = RateLimitSignal.from_response(response.status_code, response.headers)
        self.stats.rate_limited += 1
        logger.warning(
            "Rate limited ({}) on {}: x-ratelimit-remaining={} x-ratelimit-reset={} retry-after={}",
            signal.status,
            request.url,
            signal.remaining,
            signal.reset,
            signal.retry_after,
        )

        if request.retry_count >= self._config.max_retries:
            logger.error(
                "Rate limit exceeded, max retries ({}) reached for {}",
                self._config.max_retries,
                request.url,
            )
            raise ApiRateLimitError(
                request.url,
                signal.status,
                headers=response.headers,
                attempts=request.retry_count + 1,
            )

        wait, reason = signal.backoff(request.retry_count, self._clock())
        logger.warning(
            "Waiting {}s ({}) before retry {}/{}",
            round(wait, 2),
            reason.value,
            request.retry_count + 1,
            self._config.max_retries,
        )
        self.stats.waited_seconds += wait
        await self._sleep(wait)
        request.retry_count += 1

    @staticmethod
    def _parse_body(url: str, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiResponseError(f"Invalid JSON from {url}", url=url) from e

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------
    async def iter_pages(
        self,
        url_template: str,
        *,
        per_page: int = 100,
        max_pages: int | None = None,
        items_key: str | None = None,
        accept: str | None = None,
    ) -> AsyncIterator[tuple[int, list[Any]]]:
        """Iterate over pages lazily, yielding ``(page_number, items)``.

        Pagination ends after a page that is empty or shorter than
        ``per_page``, after a 409 skip outcome, or once ``max_pages`` pages
        have been fetched.

        Args:
            url_template: URL with ``{page}`` and ``{per_page}`` format fields
            per_page: Page size requested and used to detect the last page
            max_pages: Page bound (default from config; 0 means unbounded)
            items_key: Envelope key holding the items (``"items"`` for search)
            accept: Accept header override for every page request

        Raises:
            ApiResponseError: If a page is not a JSON array (or envelope)
        """
        bound = self._config.max_pages if max_pages is None else max_pages
        pages = count(1) if bound == 0 else range(1, bound + 1)

        for page in pages:
            url = url_template.format(page=page, per_page=per_page)
            outcome = await self.fetch_json(url, accept=accept)
            if isinstance(outcome, SkipOutcome):
                logger.info("No data at {} (409), stopping pagination", outcome.url)
                return

            items = outcome.as_list(items_key)
            logger.debug("Page {} returned {} item(s)", page, len(items))
            if not items:
                return

            yield page, items

            if len(items) < per_page:
                return

        logger.debug("Stopped pagination at page bound ({})", bound)

    async def paginate(
        self,
        url_template: str,
        per_page: int = 100,
        stop: StopPredicate | None = None,
        *,
        max_pages: int | None = None,
        items_key: str | None = None,
        accept: str | None = None,
    ) -> list[Any]:
        """Fetch pages in order and return the concatenation of their items.

        ``stop(page_items, collected)`` is evaluated after each page; when it
        returns True no further pages are requested. No deduplication is
        performed.
        """
        collected: list[Any] = []
        async with aclosing(
            self.iter_pages(
                url_template,
                per_page=per_page,
                max_pages=max_pages,
                items_key=items_key,
                accept=accept,
            )
        ) as pages:
            async for _page, items in pages:
                collected.extend(items)
                if stop is not None and stop(items, collected):
                    break
        return collected

    # -------------------------------------------------------------------------
    # Rate Limit Info
    # -------------------------------------------------------------------------
    async def fetch_rate_limit(self) -> RateLimitSnapshot:
        """Fetch GitHub's /rate_limit endpoint (does not count against quota)."""
        outcome = await self.fetch_json("/rate_limit")
        if isinstance(outcome, SkipOutcome):
            raise ApiResponseError("Unexpected 409 from /rate_limit", url=outcome.url)
        return RateLimitSnapshot.from_api_response(outcome.as_dict())


def github_client(settings: Settings | None = None, **kwargs: Any) -> ResilientApiClient:
    """Build a client for the GitHub REST API.

    Raises:
        ApiAuthenticationError: If GITHUB_TOKEN is not set
    """
    settings = settings or get_settings()
    if not settings.github_token:
        raise ApiAuthenticationError(
            "GitHub token required. Set GITHUB_TOKEN environment variable."
        )
    headers = {
        "Authorization": f"Bearer {settings.github_token}",
        "Accept": GITHUB_JSON,
    }
    return ResilientApiClient(
        headers,
        base_url=settings.api.github_api_url,
        config=settings.api,
        **kwargs,
    )


def gitlab_client(settings: Settings | None = None, **kwargs: Any) -> ResilientApiClient:
    """Build a client for the GitLab REST API.

    Raises:
        ApiAuthenticationError: If GITLAB_TOKEN is not set
    """
    settings = settings or get_settings()
    if not settings.gitlab_token:
        raise ApiAuthenticationError(
            "GitLab token required. Set GITLAB_TOKEN environment variable."
        )
    headers = {
        "PRIVATE-TOKEN": settings.gitlab_token,
        "Accept": "application/json",
    }
    return ResilientApiClient(
        headers,
        base_url=settings.api.gitlab_api_url,
        config=settings.api,
        **kwargs,
    )
