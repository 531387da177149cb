"""
Markup extractors for the collector.
"""

from app.scraping.parsing.jobs import extract_jobs
from app.scraping.parsing.page import extract_page
from app.scraping.parsing.pricing import extract_pricing
from app.scraping.parsing.products import extract_products

__all__ = ["extract_jobs", "extract_page", "extract_pricing", "extract_products"]
