"""
Single-attempt HTTP fetcher.
"""

from __future__ import annotations

import time

import requests

from app.scraping.errors import FetchNetworkError, FetchTimeoutError, HTTPStatusError
from app.scraping.types import FetchResult

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}


class HttpFetcher:
    """
    Performs exactly one outbound request per call.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        user_agent: str,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._session = session
        self._timeout_seconds = timeout_seconds
        self.headers = {"User-Agent": user_agent, **DEFAULT_HEADERS}

    def fetch(self, url: str, *, timeout_seconds: float | None = None) -> FetchResult:
        """
        GET `url` and return its body, raising a typed FetchError otherwise.

        The timeout is handed to `requests`, which applies it to the connect
        and to each socket read separately. It bounds a stalled server, not
        the total transfer time of a slowly streaming one.
        """

        timeout = self._timeout_seconds if timeout_seconds is None else timeout_seconds
        started = time.monotonic()
        response = self._send("GET", url, timeout=timeout)

        if not 200 <= response.status_code < 300:
            raise HTTPStatusError(
                url=url,
                status_code=response.status_code,
                reason=response.reason or "",
            )

        return FetchResult(
            url=url,
            status_code=response.status_code,
            body=response.text,
            elapsed_seconds=time.monotonic() - started,
        )

    def status_of(self, url: str, *, method: str, timeout_seconds: float) -> int:
        """
        Send one HEAD or GET and return the status code without inspecting it.
        """

        response = self._send(method, url, timeout=timeout_seconds)
        return response.status_code

    def _send(self, method: str, url: str, *, timeout: float) -> requests.Response:
        request = self._session.head if method.upper() == "HEAD" else self._session.get
        try:
            return request(
                url,
                headers=self.headers,
                timeout=timeout,
                allow_redirects=True,
            )
        except requests.Timeout as exc:
            raise FetchTimeoutError(url=url, timeout_seconds=timeout) from exc
        except requests.RequestException as exc:
            raise FetchNetworkError(str(exc) or exc.__class__.__name__, url=url) from exc
