"""Pytest configuration and shared fixtures.

Usage Guide:
- For client tests: build a client with the ``make_client`` fixture and an
  ``httpx.MockTransport`` handler; waits are recorded by ``sleep_recorder``
- For service/orchestrator tests: route requests by path with ``Router``
- For payload shapes: import factories from tests.factories
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from dev_activity.api import GITHUB_JSON, ResilientApiClient
from dev_activity.config import ApiClientConfig, get_settings

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# The injected clock always reports FROZEN_NOW so reset-based waits are exact.
# -----------------------------------------------------------------------------
FROZEN_NOW = 1_700_000_000.0
BASE_URL = "https://api.test"

Handler = Callable[[httpx.Request], Any]


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested waits."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


class Router:
    """MockTransport handler dispatching on request path (and query).

    Routes are matched against ``path`` first, then ``path?query``. A route
    value is either a response or a list of responses served in order (the
    last one repeats). Every request is recorded in ``requests``.
    """

    def __init__(self, routes: dict[str, httpx.Response | list[httpx.Response]] | None = None):
        self.routes: dict[str, httpx.Response | list[httpx.Response]] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def add(self, key: str, *responses: httpx.Response) -> None:
        self.routes[key] = list(responses) if len(responses) > 1 else responses[0]

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        query = request.url.query.decode()
        for key in (f"{request.url.path}?{query}", request.url.path):
            if key in self.routes:
                route = self.routes[key]
                if isinstance(route, list):
                    return route.pop(0) if len(route) > 1 else route[0]
                return route
        return httpx.Response(404, json={"message": "Not Found"})


# -----------------------------------------------------------------------------
# Client Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached per process; tests must not leak env changes."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def api_config() -> ApiClientConfig:
    """Default client bounds: 20 s timeout, 5 retries, 10 pages."""
    return ApiClientConfig()


@pytest.fixture
def make_client(
    sleep_recorder: SleepRecorder,
    api_config: ApiClientConfig,
) -> Callable[..., ResilientApiClient]:
    """Factory for clients backed by a mock transport.

    Usage:
        async with make_client(handler) as client:
            outcome = await client.fetch_json("/repos/o/r")
    """

    def _make(handler: Handler, **overrides: Any) -> ResilientApiClient:
        options: dict[str, Any] = {
            "base_url": BASE_URL,
            "config": api_config,
            "transport": httpx.MockTransport(handler),
            "sleep": sleep_recorder,
            "clock": lambda: FROZEN_NOW,
        }
        options.update(overrides)
        return ResilientApiClient({"Accept": GITHUB_JSON}, **options)

    return _make
