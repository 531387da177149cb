"""
BeautifulSoup helpers shared by the structured extractors.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from bs4 import BeautifulSoup, Tag

MAX_BLOCKS = 300
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5"]
DATE_PATTERNS = [
    "%Y-%m-%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%m/%d/%Y",
]


def make_soup(markup: str | bytes | None) -> BeautifulSoup:
    return BeautifulSoup(markup or "", "html.parser")


def clean_text(value: str | None) -> str:
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def node_text(node: Tag | None) -> str:
    if node is None:
        return ""
    return clean_text(node.get_text(" ", strip=True))


def select_blocks(soup: BeautifulSoup, selectors: Sequence[str]) -> list[Tag]:
    """
    Return the outermost elements matching any selector, in document order.

    A block nested inside another matched block is dropped so a plan card that
    wraps a `.plan-name` child is not counted twice.
    """

    matched: set[int] = set()
    for selector in selectors:
        for node in soup.select(selector):
            matched.add(id(node))
    if not matched:
        return []

    blocks: list[Tag] = []
    for node in soup.find_all(True):
        if id(node) not in matched:
            continue
        if any(id(parent) in matched for parent in node.parents):
            continue
        blocks.append(node)
        if len(blocks) >= MAX_BLOCKS:
            break
    return blocks


def first_text(block: Tag, selectors: Sequence[str]) -> str:
    """
    Text of the first descendant matching one of `selectors`, tried in order.
    """

    for selector in selectors:
        node = block.select_one(selector)
        text = node_text(node)
        if text:
            return text
    return ""


def heading_text(block: Tag) -> str:
    heading = block.find(HEADING_TAGS)
    return node_text(heading)


def list_items(block: Tag) -> tuple[str, ...]:
    """
    Non-empty `<li>` texts of a block, in order.
    """

    items: list[str] = []
    for li in block.find_all("li"):
        text = node_text(li)
        if text:
            items.append(text)
    return tuple(items)


def class_tokens(block: Tag) -> set[str]:
    raw = block.get("class") or []
    if isinstance(raw, str):
        raw = raw.split()
    return {token.lower() for token in raw}


def has_keyword(text: str, keywords: Iterable[str]) -> bool:
    """
    Case-insensitive whole-word match for any of `keywords`.
    """

    lowered = text.lower()
    return any(
        re.search(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])", lowered)
        for keyword in keywords
    )


def parse_date(value: str | None) -> datetime | None:
    """
    Parse an ISO timestamp or one of the common human date formats.
    """

    compact = clean_text(value)
    if not compact:
        return None

    normalized = compact[:-1] + "+00:00" if compact.endswith("Z") else compact
    try:
        parsed = datetime.fromisoformat(normalized)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    except ValueError:
        pass

    for pattern in DATE_PATTERNS:
        try:
            return datetime.strptime(compact, pattern).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def time_value(block: Tag) -> datetime | None:
    node = block.find("time")
    if node is None:
        return None
    raw = node.get("datetime")
    if isinstance(raw, str) and raw.strip():
        return parse_date(raw)
    return parse_date(node_text(node))
