"""
app/services/web_intelligence_service.py

Service wrapper exposing the collector to the rest of the application.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from app.scraping.collector import WebIntelligenceCollector
from app.scraping.config import CollectorSettings, get_collector_settings
from app.scraping.types import ChangeRecord, ScrapingResult


class WebIntelligenceService:
    """
    Holds one process-wide collector so caches and rate limits are shared
    across requests.
    """

    def __init__(
        self,
        *,
        settings: CollectorSettings | None = None,
        collector: WebIntelligenceCollector | None = None,
    ) -> None:
        self._collector = collector or WebIntelligenceCollector(
            settings=settings or get_collector_settings()
        )

    @property
    def collector(self) -> WebIntelligenceCollector:
        return self._collector

    def run(self, *, job_type: str, url: str) -> ScrapingResult[Any]:
        return self._collector.execute(job_type, url)

    def run_many(self, jobs: Sequence[tuple[str, str]]) -> list[ScrapingResult[Any]]:
        return self._collector.run_batch(jobs)

    def detect_changes(
        self,
        *,
        url: str,
        previous_content: str | None = None,
    ) -> ScrapingResult[list[ChangeRecord]]:
        return self._collector.detect_changes(url, previous_content)


@lru_cache(maxsize=1)
def get_web_intelligence_service() -> WebIntelligenceService:
    """
    Build and cache the web intelligence service.
    """

    return WebIntelligenceService()
