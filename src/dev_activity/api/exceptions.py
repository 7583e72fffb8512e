"""REST client exceptions."""

from collections.abc import Mapping


class ApiClientError(Exception):
    """Base exception for REST client errors."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ApiAuthenticationError(ApiClientError):
    """Raised when no API token is configured."""

    pass


class ApiTransportError(ApiClientError):
    """Raised when an attempt fails before any HTTP response arrives.

    Not retried by the client; the caller decides whether to skip the
    enclosing unit of work or abort.
    """

    pass


class ApiTimeoutError(ApiTransportError):
    """Raised when an attempt receives no response within its timeout."""

    pass


class ApiHttpError(ApiClientError):
    """Raised for a non-2xx response that is neither rate limiting nor 409."""

    def __init__(self, url: str, status: int, body: str = "") -> None:
        super().__init__(f"Failed to fetch {url}: {status}", url=url)
        self.status = status
        self.body = body


class ApiResponseError(ApiClientError):
    """Raised when a 2xx payload does not have the expected shape."""

    pass


class ApiRetryableError(ApiClientError):
    """Base class for errors a caller may retry later.

    The client has already exhausted its own retries when one of these
    propagates.
    """

    pass


class ApiRateLimitError(ApiRetryableError):
    """Raised when rate limiting persists after the maximum number of retries."""

    def __init__(
        self,
        url: str,
        status: int,
        headers: Mapping[str, str] | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(f"Rate limit exceeded, max retries reached for {url}", url=url)
        self.status = status
        self.headers = dict(headers or {})
        self.attempts = attempts
