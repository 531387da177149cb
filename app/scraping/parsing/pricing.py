"""
Pricing page extractor.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation

from bs4 import Tag

from app.scraping.logging_utils import log_event
from app.scraping.parsing.common import (
    class_tokens,
    first_text,
    has_keyword,
    heading_text,
    list_items,
    make_soup,
    node_text,
    select_blocks,
)
from app.scraping.types import PricingInterval, PricingPlan, PricingSnapshot

logger = logging.getLogger(__name__)

PLAN_SELECTORS = [
    ".pricing-plan",
    ".pricing-card",
    ".pricing-tier",
    ".plan-card",
    ".plan",
    "[data-pricing-plan]",
    ".pricing-table [class*='plan']",
]
NAME_SELECTORS = [".plan-name", ".plan-title", ".name", "h1", "h2", "h3", "h4", "strong"]
PRICE_SELECTORS = [".price", ".plan-price", ".amount", "[class*='price']"]
POPULAR_CLASSES = {"popular", "featured", "recommended", "highlighted", "most-popular"}
POPULAR_BADGE_KEYWORDS = ("most popular", "popular", "recommended", "best value")

PRICE_REGEX = re.compile(
    r"(?P<prefix>US\$|[$€£]|USD|EUR|GBP)\s?(?P<amount>\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)"
    r"|(?P<bare>\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)\s?(?P<suffix>[€£]|USD|EUR|GBP)",
    flags=re.IGNORECASE,
)
CURRENCY_BY_TOKEN = {
    "$": "USD",
    "us$": "USD",
    "usd": "USD",
    "€": "EUR",
    "eur": "EUR",
    "£": "GBP",
    "gbp": "GBP",
}


def extract_pricing(markup: str, url: str = "") -> PricingSnapshot | None:
    """
    Parse pricing plan blocks; return None when no plan could be read.
    """

    soup = make_soup(markup)
    plans: list[PricingPlan] = []
    currencies: list[str] = []

    for block in select_blocks(soup, PLAN_SELECTORS):
        parsed = _parse_plan(block)
        if parsed is None:
            log_event(logger, logging.DEBUG, "extraction_block_skipped", kind="pricing", url=url)
            continue
        plan, currency = parsed
        plans.append(plan)
        currencies.append(currency)

    if not plans:
        return None

    return PricingSnapshot(
        url=url,
        plans=tuple(plans),
        currency=currencies[0] if currencies else "USD",
    )


def detect_interval(price_text: str) -> PricingInterval:
    text = price_text.lower()
    if "year" in text or "annual" in text or re.search(r"/\s?yr\b", text):
        return "yearly"
    if "month" in text or re.search(r"/\s?mo\b", text):
        return "monthly"
    return "one-time"


def parse_price(price_text: str) -> tuple[Decimal, str] | None:
    """
    Return (amount, ISO currency) for the first currency-amount token.
    """

    match = PRICE_REGEX.search(price_text)
    if match is None:
        return None
    token = match.group("prefix") or match.group("suffix")
    raw_amount = match.group("amount") or match.group("bare")
    try:
        amount = Decimal(raw_amount.replace(",", ""))
    except InvalidOperation:
        return None
    return amount, CURRENCY_BY_TOKEN.get(token.lower(), "USD")


def _parse_plan(block: Tag) -> tuple[PricingPlan, str] | None:
    name = first_text(block, NAME_SELECTORS) or heading_text(block)
    price_text = first_text(block, PRICE_SELECTORS)
    price = parse_price(price_text) if price_text else None
    if price is None:
        # Fall back to the block text minus its feature list.
        price_text = _text_without_lists(block)
        price = parse_price(price_text)
    if not name or price is None:
        return None

    amount, currency = price
    plan = PricingPlan(
        name=name,
        price=amount,
        interval=detect_interval(price_text),
        features=list_items(block),
        is_popular=_is_popular(block),
    )
    return plan, currency


def _is_popular(block: Tag) -> bool:
    if class_tokens(block) & POPULAR_CLASSES:
        return True
    if block.has_attr("data-popular") or block.has_attr("data-featured"):
        return True
    for badge in block.select(".badge, .ribbon, .tag, .label, [class*='popular']"):
        if has_keyword(node_text(badge), POPULAR_BADGE_KEYWORDS):
            return True
    return False


def _text_without_lists(block: Tag) -> str:
    parts = [
        node_text(child) if isinstance(child, Tag) else str(child).strip()
        for child in block.children
        if not (isinstance(child, Tag) and child.name in {"ul", "ol"})
    ]
    return " ".join(part for part in parts if part)
