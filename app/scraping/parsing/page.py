"""
Page-level metadata extraction (title, description, meta tags, JSON-LD).
"""

from __future__ import annotations

import json
from typing import Any

from app.scraping.parsing.common import clean_text, make_soup, node_text
from app.scraping.types import PageSummary


def extract_page(markup: str) -> PageSummary:
    soup = make_soup(markup)

    metadata: dict[str, Any] = {}
    for meta in soup.find_all("meta"):
        key = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if isinstance(key, str) and key.strip() and isinstance(content, str):
            metadata[key.strip()] = content.strip()

    structured: list[Any] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            structured.append(json.loads(raw))
        except ValueError:
            continue
    if structured:
        metadata["structuredData"] = structured

    description = metadata.get("description") or metadata.get("og:description")
    return PageSummary(
        title=node_text(soup.title) or None,
        description=clean_text(description) or None,
        metadata=metadata,
    )
