"""
Careers page extractor with strategic-importance scoring.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin

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
from app.scraping.types import JobPosting, JobType, StrategicImportance, utc_now

logger = logging.getLogger(__name__)

JOB_SELECTORS = [
    ".job",
    ".job-posting",
    ".job-listing",
    ".job-opening",
    ".opening",
    ".position",
    "[data-job]",
]
TITLE_SELECTORS = [".job-title", ".title", "h1", "h2", "h3", "h4"]
LOCATION_SELECTORS = [".location", ".job-location"]
DEPARTMENT_SELECTORS = [".department", ".team", ".job-department"]
DESCRIPTION_SELECTORS = [".job-description", ".description", "p"]

EXECUTIVE_TITLES = ("ceo", "cto", "cfo", "coo", "cmo", "chief", "founder", "co-founder")
SENIOR_LEADERSHIP_TITLES = ("director", "vp", "vice president", "head of")
CORE_DEPARTMENTS = ("engineering", "product", "sales")
MID_LEVEL_TITLES = ("manager", "lead", "senior", "principal", "staff")
REMOTE_KEYWORDS = ("remote", "work from home", "distributed")


def extract_jobs(markup: str, url: str = "") -> list[JobPosting]:
    """
    Parse job blocks; blocks without a title are skipped.
    """

    soup = make_soup(markup)
    postings: list[JobPosting] = []
    for block in select_blocks(soup, JOB_SELECTORS):
        posting = _parse_job(block, url=url)
        if posting is None:
            log_event(logger, logging.DEBUG, "extraction_block_skipped", kind="jobs", url=url)
            continue
        postings.append(posting)
    return postings


def detect_job_type(text: str) -> JobType:
    if has_keyword(text, ("intern", "interns", "internship")):
        return "internship"
    if has_keyword(text, ("contract", "contractor", "freelance")):
        return "contract"
    if has_keyword(text, ("part-time", "part time")):
        return "part-time"
    return "full-time"


def detect_remote(text: str) -> bool:
    return has_keyword(text, REMOTE_KEYWORDS)


def assess_importance(title: str, department: str | None = None) -> StrategicImportance:
    """
    Rank a role by seniority and how close its department is to the core business.
    """

    if has_keyword(title, EXECUTIVE_TITLES):
        return "critical"
    if has_keyword(title, SENIOR_LEADERSHIP_TITLES) or has_keyword(
        department or "", CORE_DEPARTMENTS
    ):
        return "high"
    if has_keyword(title, MID_LEVEL_TITLES):
        return "medium"
    return "low"


def _parse_job(block: Tag, *, url: str) -> JobPosting | None:
    title = first_text(block, TITLE_SELECTORS)
    if not title:
        return None

    department = first_text(block, DEPARTMENT_SELECTORS) or None
    full_text = node_text(block)
    link = block.find("a", href=True)
    return JobPosting(
        title=title,
        department=department,
        location=first_text(block, LOCATION_SELECTORS) or None,
        type=detect_job_type(full_text),
        remote=detect_remote(full_text),
        requirements=list_items(block),
        description=first_text(block, DESCRIPTION_SELECTORS),
        posted_at=time_value(block) or utc_now(),
        url=_absolute_link(url, link.get("href")) if link is not None else url,
        strategic_importance=assess_importance(title, department),
    )


def _absolute_link(base_url: str, href: object) -> str:
    if not isinstance(href, str) or not href.strip():
        return base_url
    return urljoin(base_url, href.strip()) if base_url else href.strip()
