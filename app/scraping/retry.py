"""
Bounded retry with exponential backoff.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from app.scraping.errors import ScrapingError
from app.scraping.logging_utils import log_event
from app.scraping.types import ScrapingResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExecutor:
    """
    Runs a fetch-shaped operation up to `max_retries + 1` times.

    Permanent failures (4xx, policy denial, invalid URL) stop immediately.
    Transient ones back off `min(initial * multiplier**attempt, max)` seconds.
    """

    def __init__(
        self,
        *,
        max_retries: int = 3,
        backoff_initial_seconds: float = 1.0,
        backoff_multiplier: float = 2.0,
        backoff_max_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._max_retries = max(0, max_retries)
        self._backoff_initial_seconds = backoff_initial_seconds
        self._backoff_multiplier = backoff_multiplier
        self._backoff_max_seconds = backoff_max_seconds
        self._sleep = sleep

    def backoff_seconds(self, attempt: int) -> float:
        delay = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
        return min(delay, self._backoff_max_seconds)

    def run(self, operation: Callable[[], T], *, label: str = "") -> ScrapingResult[T]:
        last_error: ScrapingError | None = None
        attempts = 0

        for attempt in range(self._max_retries + 1):
            attempts = attempt + 1
            try:
                data = operation()
                return ScrapingResult.ok(data, retry_count=attempt)
            except ScrapingError as exc:
                last_error = exc
                if exc.permanent:
                    break

            if attempt >= self._max_retries:
                break

            delay = self.backoff_seconds(attempt)
            log_event(
                logger,
                logging.WARNING,
                "fetch_retry_scheduled",
                target=label,
                attempt=attempts,
                delay_seconds=delay,
                error=str(last_error),
            )
            self._sleep(delay)

        message = str(last_error) if last_error else "Operation failed after retries"
        log_event(
            logger,
            logging.ERROR,
            "fetch_failed",
            target=label,
            attempts=attempts,
            permanent=bool(last_error and last_error.permanent),
            error=message,
        )
        return ScrapingResult.fail(message, retry_count=attempts - 1)
