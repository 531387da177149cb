"""
URL helpers shared by the policy gate, rate limiter and collector.
"""

from __future__ import annotations

from urllib.parse import urlparse

from app.scraping.errors import InvalidURLError


def origin_of(url: str) -> str:
    """
    Return `scheme://host[:port]` for an absolute http(s) URL.

    Raises InvalidURLError for anything else.
    """

    parsed = urlparse(url.strip())
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidURLError(url)
    return f"{parsed.scheme}://{parsed.netloc.lower()}"


def normalize_domain(domain: str) -> str:
    """
    Accept `example.com`, `https://example.com/` and similar; return an origin.
    """

    candidate = domain.strip().rstrip("/")
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    return origin_of(candidate)
