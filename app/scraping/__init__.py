"""
Ethical web intelligence collection: robots-aware fetching, change detection
and structured extraction of pricing, product and job data.
"""

from app.scraping.collector import WebIntelligenceCollector
from app.scraping.config import CollectorSettings, get_collector_settings
from app.scraping.types import (
    ChangeRecord,
    JobPosting,
    PricingPlan,
    PricingSnapshot,
    ProductRecord,
    ProductSnapshot,
    ScrapingResult,
    WebsiteData,
)

__all__ = [
    "ChangeRecord",
    "CollectorSettings",
    "JobPosting",
    "PricingPlan",
    "PricingSnapshot",
    "ProductRecord",
    "ProductSnapshot",
    "ScrapingResult",
    "WebIntelligenceCollector",
    "WebsiteData",
    "get_collector_settings",
]
