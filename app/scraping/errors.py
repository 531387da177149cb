"""
Typed failures raised inside the collection pipeline.

Every error carries a `permanent` flag so retry policy can be decided without
inspecting messages.
"""

from __future__ import annotations

POLICY_DENIED_MESSAGE = "Scraping not allowed by robots.txt"


class ScrapingError(Exception):
    """
    Base class for collector failures.
    """

    permanent: bool = False


class PolicyDeniedError(ScrapingError):
    """
    robots.txt forbids fetching the URL for the configured agent.
    """

    permanent = True

    def __init__(self, url: str) -> None:
        super().__init__(POLICY_DENIED_MESSAGE)
        self.url = url


class InvalidURLError(ScrapingError):
    permanent = True

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL: {url}")
        self.url = url


class FetchError(ScrapingError):
    """
    Transport-level failure for a single fetch attempt.
    """

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class FetchTimeoutError(FetchError):
    def __init__(self, *, url: str, timeout_seconds: float) -> None:
        super().__init__(f"Request timed out after {timeout_seconds:g}s: {url}", url=url)
        self.timeout_seconds = timeout_seconds


class FetchNetworkError(FetchError):
    pass


class HTTPStatusError(FetchError):
    """
    Non-2xx response. 4xx is permanent, everything else is retried.
    """

    def __init__(self, *, url: str, status_code: int, reason: str = "") -> None:
        message = f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}"
        super().__init__(message, url=url)
        self.status_code = status_code

    @property
    def permanent(self) -> bool:  # type: ignore[override]
        return 400 <= self.status_code < 500
