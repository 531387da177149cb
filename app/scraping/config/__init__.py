"""
Config helpers for the web intelligence collector.
"""

from app.scraping.config.loader import get_collector_settings
from app.scraping.config.models import CACHE_TTL_SECONDS, DEFAULT_USER_AGENT, CollectorSettings

__all__ = [
    "CACHE_TTL_SECONDS",
    "DEFAULT_USER_AGENT",
    "CollectorSettings",
    "get_collector_settings",
]
