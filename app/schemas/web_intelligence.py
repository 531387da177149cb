"""
app/schemas/web_intelligence.py

Request/response schemas for web intelligence collection.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from app.scraping.types import ScrapingResult, to_plain


class ScrapeRequest(BaseModel):
    """
    One collection job.
    """

    model_config = ConfigDict(extra="forbid")

    job_type: Literal["website", "pricing", "products", "jobs"]
    url: str = Field(..., min_length=1)


class ChangeDetectionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., min_length=1)
    previous_content: str | None = None


class BatchScrapeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    jobs: list[ScrapeRequest] = Field(..., min_length=1, max_length=100)


class ScrapingResultResponse(BaseModel):
    """
    API view of the collector's result envelope.
    """

    success: bool
    data: Any | None = None
    error: str | None = None
    retry_count: int = Field(..., ge=0)
    response_time: float = Field(..., ge=0)
    cached: bool

    @classmethod
    def from_result(cls, result: ScrapingResult[Any]) -> "ScrapingResultResponse":
        return cls(
            success=result.success,
            data=to_plain(result.data),
            error=result.error,
            retry_count=result.retry_count,
            response_time=result.response_time,
            cached=result.cached,
        )
