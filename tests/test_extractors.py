from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.scraping.parsing import extract_jobs, extract_page, extract_pricing, extract_products
from app.scraping.parsing.common import has_keyword, parse_date, select_blocks, make_soup
from app.scraping.parsing.jobs import assess_importance, detect_job_type, detect_remote
from app.scraping.parsing.pricing import detect_interval, parse_price
from app.scraping.parsing.products import detect_status


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def test_select_blocks_keeps_outermost_matches_in_order() -> None:
    soup = make_soup(
        """
        <div class="plan" id="first"><div class="plan-card" id="inner"></div></div>
        <section class="pricing-card" id="second"></section>
        """
    )

    blocks = select_blocks(soup, [".pricing-card", ".plan", ".plan-card"])

    assert [block["id"] for block in blocks] == ["first", "second"]


def test_has_keyword_matches_whole_words_only() -> None:
    assert has_keyword("Chief Technology Officer", ("chief",)) is True
    assert has_keyword("Director of Sales", ("cto",)) is False
    assert has_keyword("International Sales", ("intern",)) is False
    assert has_keyword("Summer Intern", ("intern",)) is True


def test_parse_date_formats() -> None:
    assert parse_date("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert parse_date("2024-03-01T10:00:00Z") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
    assert parse_date("March 1, 2024") == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert parse_date("next week") is None


# ---------------------------------------------------------------------------
# Page metadata
# ---------------------------------------------------------------------------


def test_extract_page_reads_meta_and_structured_data() -> None:
    summary = extract_page(
        """
        <html><head>
          <title>  Acme   Analytics </title>
          <meta property="og:description" content="Dashboards for everyone">
          <meta name="keywords" content="analytics, bi">
          <script type="application/ld+json">{"@type": "Organization", "name": "Acme"}</script>
          <script type="application/ld+json">{not json</script>
        </head><body></body></html>
        """
    )

    assert summary.title == "Acme Analytics"
    assert summary.description == "Dashboards for everyone"
    assert summary.metadata["keywords"] == "analytics, bi"
    assert summary.metadata["structuredData"] == [{"@type": "Organization", "name": "Acme"}]


def test_extract_page_without_head() -> None:
    summary = extract_page("<p>plain</p>")

    assert summary.title is None
    assert summary.description is None
    assert summary.metadata == {}


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("$9/month", (Decimal("9"), "USD")),
        ("€1,299.50 per year", (Decimal("1299.50"), "EUR")),
        ("49 £ / mo", (Decimal("49"), "GBP")),
        ("USD 15", (Decimal("15"), "USD")),
        ("Contact sales", None),
    ],
)
def test_parse_price(text: str, expected) -> None:
    assert parse_price(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("$9/month", "monthly"),
        ("$9/mo", "monthly"),
        ("$99 billed annually", "yearly"),
        ("$99/yr", "yearly"),
        ("$499", "one-time"),
    ],
)
def test_detect_interval(text: str, expected: str) -> None:
    assert detect_interval(text) == expected


def test_extract_pricing_reads_plans_and_badges() -> None:
    snapshot = extract_pricing(
        """
        <div class="pricing-table">
          <div class="pricing-card">
            <h3 class="plan-name">Starter</h3>
            <span class="plan-price">€19 / month</span>
            <ul><li>3 projects</li></ul>
          </div>
          <div class="pricing-card">
            <span class="badge">Most Popular</span>
            <h3 class="plan-name">Team</h3>
            <span class="plan-price">€49 / month</span>
          </div>
          <div class="pricing-card">
            <h3 class="plan-name">Custom</h3>
            <p>Talk to us</p>
          </div>
        </div>
        """,
        url="https://example.com/pricing",
    )

    assert snapshot is not None
    assert snapshot.url == "https://example.com/pricing"
    assert snapshot.currency == "EUR"
    assert [plan.name for plan in snapshot.plans] == ["Starter", "Team"]
    assert snapshot.plans[0].features == ("3 projects",)
    assert snapshot.plans[0].is_popular is False
    assert snapshot.plans[1].is_popular is True


def test_extract_pricing_returns_none_without_plans() -> None:
    assert extract_pricing("<html><body><h1>Pricing</h1></body></html>") is None


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


def test_extract_products_reads_status_and_categories() -> None:
    snapshot = extract_products(
        """
        <div class="product-card" data-category="Analytics">
          <h3 class="product-name">Insights</h3>
          <p>Self-serve reporting.</p>
        </div>
        <div class="product-card">
          <h3 class="product-name">Forecasts</h3>
          <span class="category">Planning</span>
          <span class="badge">Beta</span>
          <ul><li>Scenario modelling</li></ul>
        </div>
        <div class="product-card" data-status="deprecated">
          <h3 class="product-name">Classic Reports</h3>
          <span class="category">Analytics</span>
        </div>
        <div class="product-card"><p>No name here</p></div>
        """
    )

    assert snapshot is not None
    names = [product.name for product in snapshot.products]
    assert names == ["Insights", "Forecasts", "Classic Reports"]
    assert [product.status for product in snapshot.products] == ["active", "beta", "deprecated"]
    assert snapshot.categories == ("Analytics", "Planning")
    assert snapshot.products[0].description == "Self-serve reporting."
    assert snapshot.products[1].features == ("Scenario modelling",)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Legacy beta connector", "deprecated"),
        ("Coming soon", "coming-soon"),
        ("Early access", "beta"),
        ("Generally available", "active"),
    ],
)
def test_detect_status_precedence(text: str, expected: str) -> None:
    assert detect_status(text) == expected


def test_extract_products_returns_none_without_products() -> None:
    assert extract_products("<p>About us</p>") is None


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("title", "department", "expected"),
    [
        ("Chief Technology Officer", None, "critical"),
        ("CTO", None, "critical"),
        ("Co-Founder in Residence", None, "critical"),
        ("Director of Marketing", None, "high"),
        ("Software Engineer", "Engineering", "high"),
        ("Senior Designer", "Design", "medium"),
        ("Support Specialist", "Customer Success", "low"),
    ],
)
def test_assess_importance(title: str, department, expected: str) -> None:
    assert assess_importance(title, department) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Summer Internship 2025", "internship"),
        ("Contract data engineer", "contract"),
        ("Part-time recruiter", "part-time"),
        ("International Account Executive", "full-time"),
    ],
)
def test_detect_job_type(text: str, expected: str) -> None:
    assert detect_job_type(text) == expected


def test_detect_remote() -> None:
    assert detect_remote("Remote (US)") is True
    assert detect_remote("Berlin office") is False


def test_extract_jobs_reads_postings() -> None:
    postings = extract_jobs(
        """
        <ul>
          <li class="job-posting">
            <a href="/careers/42"><h4 class="title">Senior Backend Engineer</h4></a>
            <span class="team">Engineering</span>
            <span class="job-location">Remote, EU</span>
            <time datetime="2024-05-02">May 2, 2024</time>
            <p>Build ingestion services.</p>
          </li>
          <li class="job-posting"><span>No title</span></li>
        </ul>
        """,
        url="https://example.com/careers",
    )

    assert len(postings) == 1
    posting = postings[0]
    assert posting.title == "Senior Backend Engineer"
    assert posting.department == "Engineering"
    assert posting.location == "Remote, EU"
    assert posting.remote is True
    assert posting.type == "full-time"
    assert posting.strategic_importance == "high"
    assert posting.url == "https://example.com/careers/42"
    assert posting.posted_at == datetime(2024, 5, 2, tzinfo=timezone.utc)
    assert posting.description == "Build ingestion services."


def test_extract_jobs_empty_page() -> None:
    assert extract_jobs("<p>We are not hiring right now.</p>") == []
