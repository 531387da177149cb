"""
robots.txt policy gate for collector compliance.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from urllib.robotparser import RobotFileParser

from app.scraping.errors import FetchError, HTTPStatusError
from app.scraping.fetcher import HttpFetcher
from app.scraping.logging_utils import log_event
from app.scraping.urls import origin_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyRecord:
    """
    Parsed robots rules for one origin.

    `loaded` is False when the rules are the fallback policy used because the
    origin's robots.txt could not be retrieved.
    """

    origin: str
    parser: RobotFileParser
    loaded: bool


class RobotsPolicyGate:
    """
    Caches robots.txt rules per origin for the lifetime of the gate.

    Concurrent first lookups for an origin share one fetch: the first caller
    installs a Future under the lock and fetches outside it, later callers
    wait on that Future.
    """

    def __init__(
        self,
        *,
        fetcher: HttpFetcher,
        timeout_seconds: float = 10.0,
        allow_when_unreachable: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._timeout_seconds = timeout_seconds
        self._allow_when_unreachable = allow_when_unreachable
        self._records: dict[str, Future[PolicyRecord]] = {}
        self._lock = threading.Lock()

    def allowed(self, *, url: str, user_agent: str) -> bool:
        """
        Return whether fetching `url` is allowed for `user_agent`.
        """

        record = self.policy_for(url)
        return record.parser.can_fetch(user_agent, url)

    def crawl_delay(self, *, url: str, user_agent: str) -> float | None:
        """
        Return crawl-delay if published in robots.txt for this URL.
        """

        parser = self.policy_for(url).parser
        delay = parser.crawl_delay(user_agent)
        if delay is None:
            delay = parser.crawl_delay("*")
        return float(delay) if delay is not None else None

    def policy_for(self, url: str) -> PolicyRecord:
        origin = origin_of(url)
        with self._lock:
            pending = self._records.get(origin)
            owner = pending is None
            if owner:
                pending = Future()
                self._records[origin] = pending

        if owner:
            try:
                pending.set_result(self._load(origin))
            except BaseException as exc:
                with self._lock:
                    self._records.pop(origin, None)
                pending.set_exception(exc)
                raise
        return pending.result()

    def _load(self, origin: str) -> PolicyRecord:
        parser = RobotFileParser()
        robots_url = f"{origin}/robots.txt"
        parser.set_url(robots_url)
        try:
            result = self._fetcher.fetch(robots_url, timeout_seconds=self._timeout_seconds)
        except HTTPStatusError as exc:
            # A missing robots.txt (4xx) publishes no restrictions.
            if exc.permanent:
                parser.allow_all = True
            else:
                self._apply_fallback_policy(parser)
            log_event(
                logger,
                logging.WARNING,
                "robots_unavailable",
                origin=origin,
                robots_url=robots_url,
                status_code=exc.status_code,
                fallback_allow=parser.allow_all or self._allow_when_unreachable,
            )
            return PolicyRecord(origin=origin, parser=parser, loaded=False)
        except FetchError as exc:
            self._apply_fallback_policy(parser)
            log_event(
                logger,
                logging.WARNING,
                "robots_fetch_failed",
                origin=origin,
                robots_url=robots_url,
                fallback_allow=self._allow_when_unreachable,
                error=str(exc),
            )
            return PolicyRecord(origin=origin, parser=parser, loaded=False)

        parser.parse(result.body.splitlines())
        log_event(
            logger,
            logging.INFO,
            "robots_loaded",
            origin=origin,
            robots_url=robots_url,
        )
        return PolicyRecord(origin=origin, parser=parser, loaded=True)

    def _apply_fallback_policy(self, parser: RobotFileParser) -> None:
        if self._allow_when_unreachable:
            parser.parse(["User-agent: *", "Allow: /"])
        else:
            parser.parse(["User-agent: *", "Disallow: /"])
