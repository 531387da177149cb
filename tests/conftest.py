"""Shared fixtures: an in-memory stand-in for requests.Session."""

from __future__ import annotations

import dataclasses
import threading
import time
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import pytest
import requests

from app.scraping.collector import WebIntelligenceCollector
from app.scraping.config import CollectorSettings


def make_response(url: str, status_code: int = 200, body: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.url = url
    try:
        response.reason = HTTPStatus(status_code).phrase
    except ValueError:
        response.reason = ""
    return response


@dataclass(frozen=True)
class Call:
    method: str
    url: str
    headers: dict[str, str]
    timeout: Any
    at: float


class FakeSession:
    """
    Routes are keyed by URL. A route value may be:
    - a string: 200 with that body
    - a (status, body) tuple
    - an exception instance: raised
    - a list of any of the above: consumed one per call, last one repeats
    Unknown robots.txt URLs answer 404; other unknown URLs answer 404 too.
    """

    def __init__(self, routes: dict[str, Any] | None = None, *, latency: float = 0.0) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.latency = latency
        self.calls: list[Call] = []
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url: str, headers=None, timeout=None, allow_redirects=True) -> requests.Response:
        return self._dispatch("GET", url, headers, timeout)

    def head(self, url: str, headers=None, timeout=None, allow_redirects=True) -> requests.Response:
        return self._dispatch("HEAD", url, headers, timeout)

    def close(self) -> None:
        self.closed = True

    def page_calls(self, method: str | None = None) -> list[Call]:
        return [
            call
            for call in self.calls
            if not call.url.endswith("/robots.txt") and (method is None or call.method == method)
        ]

    def robots_calls(self) -> list[Call]:
        return [call for call in self.calls if call.url.endswith("/robots.txt")]

    def _dispatch(self, method: str, url: str, headers, timeout) -> requests.Response:
        with self._lock:
            self.calls.append(Call(method, url, dict(headers or {}), timeout, time.monotonic()))
            route = self.routes.get(url, (404, ""))
            if isinstance(route, list):
                route = route.pop(0) if len(route) > 1 else route[0]

        if self.latency:
            time.sleep(self.latency)
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, tuple):
            status_code, body = route
            return make_response(url, status_code, body)
        return make_response(url, 200, route)


@pytest.fixture()
def fast_settings() -> CollectorSettings:
    """Settings with no waiting so tests run instantly."""
    return CollectorSettings(
        request_delay_seconds=0.0,
        backoff_initial_seconds=0.0,
        backoff_max_seconds=0.0,
        timeout_seconds=5.0,
    )


@pytest.fixture()
def make_collector(fast_settings: CollectorSettings):
    def _build(
        routes: dict[str, Any] | None = None,
        *,
        extractors: dict[str, Any] | None = None,
        **overrides: Any,
    ) -> tuple[WebIntelligenceCollector, FakeSession]:
        session = FakeSession(routes)
        settings = dataclasses.replace(fast_settings, **overrides)
        collector = WebIntelligenceCollector(
            settings=settings,
            session=session,
            extractors=extractors,
        )
        return collector, session

    return _build
