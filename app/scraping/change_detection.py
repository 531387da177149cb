"""
Change detection between page snapshots.

`detect` is a coarse, content-level comparison. Pricing and product changes
are found by extracting both versions and diffing the structured snapshots.
"""

from __future__ import annotations

from app.scraping.types import (
    ChangeRecord,
    PricingPlan,
    PricingSnapshot,
    ProductRecord,
    ProductSnapshot,
)

EXCERPT_LENGTH = 200


def tokenize(text: str) -> set[str]:
    return set(text.lower().split())


def jaccard_similarity(first: str, second: str) -> float:
    """
    |A ∩ B| / |A ∪ B| over lowercase whitespace tokens; 1.0 for two empty texts.
    """

    first_tokens = tokenize(first)
    second_tokens = tokenize(second)
    union = first_tokens | second_tokens
    if not union:
        return 1.0
    return len(first_tokens & second_tokens) / len(union)


def excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."


def detect(previous: str, current: str, url: str) -> list[ChangeRecord]:
    """
    Return one `content` change record, or nothing when only whitespace differs.
    """

    if previous == current or previous.split() == current.split():
        return []

    similarity = jaccard_similarity(previous, current)
    return [
        ChangeRecord(
            url=url,
            change_type="content",
            old_value=excerpt(previous),
            new_value=excerpt(current),
            confidence=round(1.0 - similarity, 6),
        )
    ]


def diff_pricing(old: PricingSnapshot, new: PricingSnapshot, url: str) -> list[ChangeRecord]:
    old_plans = {plan.name.lower(): plan for plan in old.plans}
    new_plans = {plan.name.lower(): plan for plan in new.plans}
    changes: list[ChangeRecord] = []

    for key, plan in new_plans.items():
        previous = old_plans.get(key)
        if previous is None:
            changes.append(_pricing_change(url, None, plan))
        elif _plan_fields(previous) != _plan_fields(plan):
            changes.append(_pricing_change(url, previous, plan))

    for key, plan in old_plans.items():
        if key not in new_plans:
            changes.append(_pricing_change(url, plan, None))

    if old.currency != new.currency:
        changes.append(
            ChangeRecord(
                url=url,
                change_type="pricing",
                old_value=f"currency {old.currency}",
                new_value=f"currency {new.currency}",
                confidence=1.0,
            )
        )
    return changes


def diff_products(old: ProductSnapshot, new: ProductSnapshot, url: str) -> list[ChangeRecord]:
    old_products = {product.name.lower(): product for product in old.products}
    new_products = {product.name.lower(): product for product in new.products}
    changes: list[ChangeRecord] = []

    for key, product in new_products.items():
        previous = old_products.get(key)
        if previous is None or _product_fields(previous) != _product_fields(product):
            changes.append(_product_change(url, previous, product))

    for key, product in old_products.items():
        if key not in new_products:
            changes.append(_product_change(url, product, None))
    return changes


def _plan_fields(plan: PricingPlan) -> tuple:
    return (plan.price, plan.interval, plan.features, plan.is_popular)


def _product_fields(product: ProductRecord) -> tuple:
    return (product.status, product.description, product.features)


def _describe_plan(plan: PricingPlan | None) -> str | None:
    if plan is None:
        return None
    label = f"{plan.name}: {plan.price} {plan.interval}"
    if plan.features:
        label += f" ({', '.join(plan.features)})"
    return excerpt(label)


def _pricing_change(
    url: str,
    old: PricingPlan | None,
    new: PricingPlan | None,
) -> ChangeRecord:
    return ChangeRecord(
        url=url,
        change_type="pricing",
        old_value=_describe_plan(old),
        new_value=_describe_plan(new),
        confidence=1.0,
    )


def _describe_product(product: ProductRecord | None) -> str | None:
    if product is None:
        return None
    label = f"{product.name} [{product.status}]"
    if product.features:
        label += f" ({', '.join(product.features)})"
    return excerpt(label)


def _product_change(
    url: str,
    old: ProductRecord | None,
    new: ProductRecord | None,
) -> ChangeRecord:
    return ChangeRecord(
        url=url,
        change_type="product",
        old_value=_describe_product(old),
        new_value=_describe_product(new),
        confidence=1.0,
    )
