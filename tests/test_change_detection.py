from __future__ import annotations

from decimal import Decimal

from app.scraping.change_detection import detect, diff_pricing, diff_products, excerpt, jaccard_similarity
from app.scraping.types import PricingPlan, PricingSnapshot, ProductRecord, ProductSnapshot

URL = "https://example.com/pricing"


def test_jaccard_similarity_bounds() -> None:
    assert jaccard_similarity("", "") == 1.0
    assert jaccard_similarity("a b", "a b") == 1.0
    assert jaccard_similarity("a b", "c d") == 0.0
    assert jaccard_similarity("A b c", "a B d") == 0.5


def test_detect_identical_or_whitespace_only_is_no_change() -> None:
    assert detect("same text", "same text", URL) == []
    assert detect("same   text\n", " same text", URL) == []


def test_detect_reports_content_change_with_confidence() -> None:
    changes = detect("alpha beta gamma", "alpha beta delta", URL)

    assert len(changes) == 1
    change = changes[0]
    assert change.url == URL
    assert change.change_type == "content"
    assert change.old_value == "alpha beta gamma"
    assert change.new_value == "alpha beta delta"
    assert change.confidence == 0.5


def test_excerpt_truncates_long_values() -> None:
    long_text = "x" * 250

    assert excerpt(long_text) == "x" * 200 + "..."
    assert excerpt("short") == "short"

    changes = detect("old", long_text, URL)
    assert changes[0].new_value.endswith("...")
    assert len(changes[0].new_value) == 203


def _plan(name: str, price: str, interval: str = "monthly", **kwargs) -> PricingPlan:
    return PricingPlan(name=name, price=Decimal(price), interval=interval, **kwargs)


def test_diff_pricing_reports_added_changed_and_removed_plans() -> None:
    old = PricingSnapshot(
        url=URL,
        plans=(_plan("Basic", "9"), _plan("Pro", "29"), _plan("Legacy", "5")),
        currency="USD",
    )
    new = PricingSnapshot(
        url=URL,
        plans=(_plan("Basic", "9"), _plan("Pro", "35"), _plan("Enterprise", "99", "yearly")),
        currency="USD",
    )

    changes = diff_pricing(old, new, URL)

    assert [change.change_type for change in changes] == ["pricing"] * 3
    described = [(change.old_value, change.new_value) for change in changes]
    assert described == [
        ("Pro: 29 monthly", "Pro: 35 monthly"),
        (None, "Enterprise: 99 yearly"),
        ("Legacy: 5 monthly", None),
    ]


def test_diff_pricing_reports_currency_switch() -> None:
    old = PricingSnapshot(url=URL, plans=(_plan("Basic", "9"),), currency="USD")
    new = PricingSnapshot(url=URL, plans=(_plan("Basic", "9"),), currency="EUR")

    changes = diff_pricing(old, new, URL)

    assert len(changes) == 1
    assert changes[0].old_value == "currency USD"
    assert changes[0].new_value == "currency EUR"


def test_diff_products_reports_status_changes() -> None:
    old = ProductSnapshot(
        url=URL,
        products=(ProductRecord(name="Forecasts", status="beta"), ProductRecord(name="Reports")),
    )
    new = ProductSnapshot(
        url=URL,
        products=(ProductRecord(name="Forecasts"), ProductRecord(name="Reports")),
    )

    changes = diff_products(old, new, URL)

    assert len(changes) == 1
    assert changes[0].change_type == "product"
    assert changes[0].old_value == "Forecasts [beta]"
    assert changes[0].new_value == "Forecasts [active]"


def test_diff_products_unchanged() -> None:
    snapshot = ProductSnapshot(url=URL, products=(ProductRecord(name="Reports"),))

    assert diff_products(snapshot, snapshot, URL) == []
