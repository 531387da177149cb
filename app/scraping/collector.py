"""
Web intelligence collector facade.

Every public operation runs the same pipeline:
cache -> robots policy -> retried (fetch slot -> rate limit -> fetch) -> extract -> cache
and returns a ScrapingResult instead of raising.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

import requests

from app.scraping import change_detection
from app.scraping.cache import ResultCache, cache_key
from app.scraping.config.models import CACHE_TTL_SECONDS, CollectorSettings
from app.scraping.errors import FetchError, PolicyDeniedError, ScrapingError
from app.scraping.fetcher import HttpFetcher
from app.scraping.logging_utils import log_event
from app.scraping.parsing import extract_page
from app.scraping.rate_limiter import OriginRateLimiter
from app.scraping.registry import Extractor, ExtractorRegistry
from app.scraping.retry import RetryExecutor
from app.scraping.robots import RobotsPolicyGate
from app.scraping.types import (
    JOB_KINDS,
    ChangeRecord,
    FetchResult,
    JobPosting,
    PricingSnapshot,
    ProductSnapshot,
    ScrapingResult,
    WebsiteData,
)
from app.scraping.urls import normalize_domain, origin_of

logger = logging.getLogger(__name__)

EMPTY_EXTRACTION_MESSAGES = {
    "pricing": "No pricing data found",
    "products": "No product data found",
    "jobs": "No job postings found",
}
DISCOVERY_PATHS: dict[str, tuple[str, ...]] = {
    "pricing": ("/pricing", "/plans", "/subscribe", "/buy", "/purchase"),
    "products": ("/products", "/features", "/solutions", "/services"),
    "jobs": ("/careers", "/jobs", "/hiring", "/join", "/work-with-us"),
}


class WebIntelligenceCollector:
    """
    Policy-compliant collector owning its caches, rate limiter and HTTP session.

    Instances are safe to share between threads.
    """

    def __init__(
        self,
        *,
        settings: CollectorSettings | None = None,
        session: requests.Session | None = None,
        extractors: ExtractorRegistry | Mapping[str, Extractor | str] | None = None,
    ) -> None:
        self._settings = settings or CollectorSettings()
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._fetcher = HttpFetcher(
            session=self._session,
            user_agent=self._settings.user_agent,
            timeout_seconds=self._settings.timeout_seconds,
        )
        self._policy = RobotsPolicyGate(
            fetcher=self._fetcher,
            timeout_seconds=self._settings.robots_timeout_seconds,
            allow_when_unreachable=self._settings.allow_when_robots_unreachable,
        )
        self._rate_limiter = OriginRateLimiter(
            request_delay_seconds=self._settings.request_delay_seconds,
        )
        self._retry = RetryExecutor(
            max_retries=self._settings.max_retries,
            backoff_initial_seconds=self._settings.backoff_initial_seconds,
            backoff_multiplier=self._settings.backoff_multiplier,
            backoff_max_seconds=self._settings.backoff_max_seconds,
        )
        self._cache = ResultCache(ttl_seconds=CACHE_TTL_SECONDS)
        if isinstance(extractors, ExtractorRegistry):
            self._extractors = extractors
        else:
            self._extractors = ExtractorRegistry(extractors)
        self._fetch_slots = threading.BoundedSemaphore(
            max(1, self._settings.max_concurrent_requests)
        )

    @property
    def settings(self) -> CollectorSettings:
        return self._settings

    @property
    def cache(self) -> ResultCache:
        return self._cache

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "WebIntelligenceCollector":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def scrape_page(self, url: str) -> ScrapingResult[WebsiteData]:
        """
        Fetch one page and return its normalized snapshot.
        """

        started = time.monotonic()
        key = cache_key("website", url)
        try:
            cached = self._cache.get(key)
            if cached is not None:
                return self._cached_result(cached, key=key, started=started)

            self._ensure_allowed(url)
            fetched = self._retry.run(lambda: self._fetch_once(url), label=url)
            if not fetched.success or fetched.data is None:
                return ScrapingResult.fail(
                    fetched.error or "Unknown scraping error",
                    retry_count=fetched.retry_count,
                    response_time=self._elapsed(started),
                )

            data = self._build_snapshot(fetched.data, started=started)
            self._cache.set(key, data)
            return ScrapingResult.ok(
                data,
                retry_count=fetched.retry_count,
                response_time=self._elapsed(started),
            )
        except Exception as exc:
            return self._failure(url, exc, started=started, operation="website")

    def detect_changes(
        self,
        url: str,
        previous_content: str | None = None,
    ) -> ScrapingResult[list[ChangeRecord]]:
        """
        Compare the current page content with `previous_content`.

        Without previous content the page is still fetched but the change list
        is empty.
        """

        started = time.monotonic()
        page = self.scrape_page(url)
        if not page.success or page.data is None:
            return self._propagate_failure(page, started=started)

        changes: list[ChangeRecord] = []
        if previous_content is not None:
            changes = change_detection.detect(previous_content, page.data.content, url)
        return ScrapingResult.ok(
            changes,
            retry_count=page.retry_count,
            response_time=self._elapsed(started),
            cached=page.cached,
        )

    def monitor_pricing(self, url: str) -> ScrapingResult[PricingSnapshot]:
        return self._extract("pricing", url)

    def track_products(self, url: str) -> ScrapingResult[ProductSnapshot]:
        return self._extract("products", url)

    def scrape_jobs(self, url: str) -> ScrapingResult[list[JobPosting]]:
        return self._extract("jobs", url)

    def detect_pricing_changes(
        self,
        url: str,
        previous: PricingSnapshot,
    ) -> ScrapingResult[list[ChangeRecord]]:
        started = time.monotonic()
        current = self.monitor_pricing(url)
        if not current.success or current.data is None:
            return self._propagate_failure(current, started=started)
        return ScrapingResult.ok(
            change_detection.diff_pricing(previous, current.data, url),
            retry_count=current.retry_count,
            response_time=self._elapsed(started),
            cached=current.cached,
        )

    def detect_product_changes(
        self,
        url: str,
        previous: ProductSnapshot,
    ) -> ScrapingResult[list[ChangeRecord]]:
        started = time.monotonic()
        current = self.track_products(url)
        if not current.success or current.data is None:
            return self._propagate_failure(current, started=started)
        return ScrapingResult.ok(
            change_detection.diff_products(previous, current.data, url),
            retry_count=current.retry_count,
            response_time=self._elapsed(started),
            cached=current.cached,
        )

    def execute(self, job_type: str, url: str) -> ScrapingResult[Any]:
        """
        Dispatch one `website|pricing|products|jobs` job.
        """

        operations: dict[str, Callable[[str], ScrapingResult[Any]]] = {
            "website": self.scrape_page,
            "pricing": self.monitor_pricing,
            "products": self.track_products,
            "jobs": self.scrape_jobs,
        }
        operation = operations.get(job_type.strip().lower())
        if operation is None:
            allowed = ", ".join(JOB_KINDS)
            return ScrapingResult.fail(f"Unknown job type '{job_type}'. Allowed: {allowed}.")
        return operation(url)

    def run_batch(self, jobs: Iterable[tuple[str, str]]) -> list[ScrapingResult[Any]]:
        """
        Run `(job_type, url)` pairs concurrently; results keep the input order.
        """

        pending = list(jobs)
        if not pending:
            return []

        workers = min(len(pending), max(1, self._settings.max_concurrent_requests))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="collector") as pool:
            results = list(pool.map(lambda job: self.execute(*job), pending))

        log_event(
            logger,
            logging.INFO,
            "batch_completed",
            jobs=len(results),
            succeeded=sum(1 for result in results if result.success),
            failed=sum(1 for result in results if not result.success),
        )
        return results

    def check_url_exists(self, url: str) -> bool:
        """
        Cheap existence check (HEAD, falling back to GET). Never raises.
        """

        try:
            self._ensure_allowed(url)
            try:
                status_code = self._request_status(url, method="HEAD")
                if status_code != 405:
                    return 200 <= status_code < 300
            except FetchError as exc:
                log_event(logger, logging.DEBUG, "url_check_head_failed", url=url, error=str(exc))
            return 200 <= self._request_status(url, method="GET") < 300
        except ScrapingError as exc:
            log_event(logger, logging.DEBUG, "url_check_failed", url=url, error=str(exc))
            return False

    def discover_page(self, domain: str, job_type: str) -> str | None:
        """
        Return the first common path for `job_type` that exists on `domain`.
        """

        paths = DISCOVERY_PATHS.get(job_type.strip().lower())
        if paths is None:
            allowed = ", ".join(sorted(DISCOVERY_PATHS))
            raise ValueError(f"Cannot discover pages for job type '{job_type}'. Allowed: {allowed}.")

        try:
            origin = normalize_domain(domain)
        except ScrapingError:
            return None

        for path in paths:
            candidate = f"{origin}{path}"
            if self.check_url_exists(candidate):
                return candidate
        return None

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _extract(self, kind: str, url: str) -> ScrapingResult[Any]:
        started = time.monotonic()
        key = cache_key(kind, url)
        try:
            cached = self._cache.get(key)
            if cached is not None:
                return self._cached_result(cached, key=key, started=started)

            page = self.scrape_page(url)
            if not page.success or page.data is None:
                return self._propagate_failure(page, started=started)

            extractor = self._extractors.get(kind)
            extracted = extractor(page.data.content, url=url)
            if not extracted:
                log_event(logger, logging.INFO, "extraction_empty", kind=kind, url=url)
                return ScrapingResult.fail(
                    EMPTY_EXTRACTION_MESSAGES[kind],
                    retry_count=page.retry_count,
                    response_time=self._elapsed(started),
                )

            stored = tuple(extracted) if isinstance(extracted, list) else extracted
            self._cache.set(key, stored)
            return ScrapingResult.ok(
                self._unfreeze(stored),
                retry_count=page.retry_count,
                response_time=self._elapsed(started),
            )
        except Exception as exc:
            return self._failure(url, exc, started=started, operation=kind)

    def _ensure_allowed(self, url: str) -> None:
        origin_of(url)
        if not self._settings.respect_robots_txt:
            return
        if not self._policy.allowed(url=url, user_agent=self._settings.user_agent):
            log_event(logger, logging.WARNING, "page_blocked_by_robots", url=url)
            raise PolicyDeniedError(url)

    def _crawl_delay(self, url: str) -> float | None:
        if not self._settings.respect_robots_txt:
            return None
        return self._policy.crawl_delay(url=url, user_agent=self._settings.user_agent)

    def _fetch_once(self, url: str) -> FetchResult:
        with self._fetch_slots:
            self._wait_for_turn(url)
            return self._fetcher.fetch(url)

    def _request_status(self, url: str, *, method: str) -> int:
        with self._fetch_slots:
            self._wait_for_turn(url)
            return self._fetcher.status_of(
                url,
                method=method,
                timeout_seconds=self._settings.url_check_timeout_seconds,
            )

    def _wait_for_turn(self, url: str) -> None:
        # Called with a fetch slot held, so the reserved origin slot is the
        # moment the request actually goes out.
        self._rate_limiter.wait(url=url, min_interval_seconds=self._crawl_delay(url))

    def _build_snapshot(self, fetched: FetchResult, *, started: float) -> WebsiteData:
        summary = extract_page(fetched.body)
        return WebsiteData(
            url=fetched.url,
            title=summary.title,
            description=summary.description,
            content=fetched.body,
            metadata=summary.metadata,
            scraped_at=datetime.now(timezone.utc),
            response_time=self._elapsed(started),
            status_code=fetched.status_code,
        )

    def _cached_result(self, value: Any, *, key: str, started: float) -> ScrapingResult[Any]:
        log_event(logger, logging.DEBUG, "cache_hit", key=key)
        return ScrapingResult.ok(
            self._unfreeze(value),
            response_time=self._elapsed(started),
            cached=True,
        )

    def _propagate_failure(self, result: ScrapingResult[Any], *, started: float) -> ScrapingResult[Any]:
        return ScrapingResult.fail(
            result.error or "Unknown scraping error",
            retry_count=result.retry_count,
            response_time=self._elapsed(started),
        )

    def _failure(
        self,
        url: str,
        exc: Exception,
        *,
        started: float,
        operation: str,
    ) -> ScrapingResult[Any]:
        if isinstance(exc, ScrapingError):
            level = logging.WARNING
        else:
            level = logging.ERROR
        log_event(
            logger,
            level,
            "operation_failed",
            operation=operation,
            url=url,
            error=str(exc),
            error_type=exc.__class__.__name__,
        )
        return ScrapingResult.fail(
            str(exc) or exc.__class__.__name__,
            response_time=self._elapsed(started),
        )

    @staticmethod
    def _unfreeze(value: Any) -> Any:
        return list(value) if isinstance(value, tuple) else value

    @staticmethod
    def _elapsed(started: float) -> float:
        return time.monotonic() - started
