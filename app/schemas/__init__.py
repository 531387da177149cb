"""
app/schemas package marker.
"""

from app.schemas.web_intelligence import (
    BatchScrapeRequest,
    ChangeDetectionRequest,
    ScrapeRequest,
    ScrapingResultResponse,
)

__all__ = [
    "BatchScrapeRequest",
    "ChangeDetectionRequest",
    "ScrapeRequest",
    "ScrapingResultResponse",
]
