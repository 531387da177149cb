"""
Product page extractor.
"""

from __future__ import annotations

import logging

from bs4 import Tag

from app.scraping.logging_utils import log_event
from app.scraping.parsing.common import (
    first_text,
    has_keyword,
    list_items,
    make_soup,
    node_text,
    select_blocks,
    time_value,
)
from app.scraping.types import ProductRecord, ProductSnapshot, ProductStatus

logger = logging.getLogger(__name__)

PRODUCT_SELECTORS = [
    ".product",
    ".product-card",
    ".product-item",
    ".feature-card",
    ".platform-module",
    "[data-product]",
    ".solutions-grid article",
]
NAME_SELECTORS = [".product-name", ".product-title", ".name", "h1", "h2", "h3", "h4"]
DESCRIPTION_SELECTORS = [".description", ".product-description", ".summary", "p"]
CATEGORY_SELECTORS = [".category", ".product-category"]
STATUS_SELECTORS = [".status", ".badge", ".tag", ".label"]

# Checked in order; first hit wins.
STATUS_KEYWORDS: list[tuple[ProductStatus, tuple[str, ...]]] = [
    ("deprecated", ("deprecated", "discontinued", "end of life", "sunset", "legacy")),
    ("coming-soon", ("coming soon", "coming-soon", "upcoming")),
    ("beta", ("beta", "preview", "early access")),
]


def extract_products(markup: str, url: str = "") -> ProductSnapshot | None:
    """
    Parse product blocks; blocks without a name are skipped.
    """

    soup = make_soup(markup)
    products: list[ProductRecord] = []
    for block in select_blocks(soup, PRODUCT_SELECTORS):
        product = _parse_product(block)
        if product is None:
            log_event(logger, logging.DEBUG, "extraction_block_skipped", kind="products", url=url)
            continue
        products.append(product)

    if not products:
        return None

    categories: list[str] = []
    for product in products:
        if product.category and product.category not in categories:
            categories.append(product.category)

    return ProductSnapshot(url=url, products=tuple(products), categories=tuple(categories))


def detect_status(text: str) -> ProductStatus:
    for status, keywords in STATUS_KEYWORDS:
        if has_keyword(text, keywords):
            return status
    return "active"


def _parse_product(block: Tag) -> ProductRecord | None:
    name = first_text(block, NAME_SELECTORS)
    if not name:
        return None

    category = first_text(block, CATEGORY_SELECTORS) or _attribute(block, "data-category")
    status_source = " ".join(
        part
        for part in (
            _attribute(block, "data-status"),
            *(node_text(node) for node in block.select(", ".join(STATUS_SELECTORS))),
            name,
        )
        if part
    )
    return ProductRecord(
        name=name,
        description=first_text(block, DESCRIPTION_SELECTORS) or None,
        category=category or None,
        features=list_items(block),
        status=detect_status(status_source),
        launched_at=time_value(block),
    )


def _attribute(block: Tag, name: str) -> str:
    value = block.get(name)
    if isinstance(value, str):
        return value.strip()
    return ""
