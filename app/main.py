from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_app_settings
from app.scraping.logging_utils import configure_logging


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Close the shared collector's HTTP session on shutdown."""
    try:
        yield
    finally:
        from app.services.web_intelligence_service import get_web_intelligence_service

        if get_web_intelligence_service.cache_info().currsize:
            get_web_intelligence_service().collector.close()
            logging.getLogger(__name__).info("Collector session closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    settings = get_app_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.title,
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import web_intelligence_router

    application.include_router(web_intelligence_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
