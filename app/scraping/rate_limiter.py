"""
Origin-aware request rate limiter.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from app.scraping.logging_utils import log_event
from app.scraping.urls import origin_of

logger = logging.getLogger(__name__)


class OriginRateLimiter:
    """
    Enforces a minimum interval between requests per origin.

    The next free slot for an origin is reserved under the lock and the caller
    sleeps after releasing it, so same-origin callers queue up one interval
    apart while other origins are never held back.
    """

    def __init__(
        self,
        *,
        request_delay_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._request_delay_seconds = max(0.0, request_delay_seconds)
        self._clock = clock
        self._sleep = sleep
        self._last_request_by_origin: dict[str, float] = {}
        self._lock = threading.Lock()

    def wait(self, *, url: str, min_interval_seconds: float | None = None) -> float:
        """
        Block until `url`'s origin may be requested again; return seconds waited.
        """

        origin = origin_of(url)
        interval = self._request_delay_seconds
        if min_interval_seconds is not None:
            interval = max(interval, min_interval_seconds)

        with self._lock:
            now = self._clock()
            last_time = self._last_request_by_origin.get(origin)
            slot = now if last_time is None else max(now, last_time + interval)
            self._last_request_by_origin[origin] = slot

        wait_seconds = slot - now
        if wait_seconds > 0:
            log_event(
                logger,
                logging.DEBUG,
                "rate_limit_wait",
                origin=origin,
                wait_seconds=round(wait_seconds, 3),
            )
            self._sleep(wait_seconds)
        return wait_seconds
