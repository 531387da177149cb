"""
app/api/routers/web_intelligence.py

Web intelligence collection endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.schemas.web_intelligence import (
    BatchScrapeRequest,
    ChangeDetectionRequest,
    ScrapeRequest,
    ScrapingResultResponse,
)
from app.services.web_intelligence_service import (
    WebIntelligenceService,
    get_web_intelligence_service,
)

router = APIRouter(prefix="/web-intelligence", tags=["web-intelligence"])


@router.post("/scrape", response_model=ScrapingResultResponse)
def scrape(
    request: ScrapeRequest,
    service: WebIntelligenceService = Depends(get_web_intelligence_service),
) -> ScrapingResultResponse:
    """
    Run one collection job. Failures are reported in the envelope, not as HTTP errors.
    """

    result = service.run(job_type=request.job_type, url=request.url)
    return ScrapingResultResponse.from_result(result)


@router.post("/scrape/batch", response_model=list[ScrapingResultResponse])
def scrape_batch(
    request: BatchScrapeRequest,
    service: WebIntelligenceService = Depends(get_web_intelligence_service),
) -> list[ScrapingResultResponse]:
    results = service.run_many([(job.job_type, job.url) for job in request.jobs])
    return [ScrapingResultResponse.from_result(result) for result in results]


@router.post("/changes", response_model=ScrapingResultResponse)
def detect_changes(
    request: ChangeDetectionRequest,
    service: WebIntelligenceService = Depends(get_web_intelligence_service),
) -> ScrapingResultResponse:
    result = service.detect_changes(url=request.url, previous_content=request.previous_content)
    return ScrapingResultResponse.from_result(result)
