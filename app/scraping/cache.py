"""
Short-lived in-memory result cache.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from app.scraping.config.models import CACHE_TTL_SECONDS
from app.scraping.types import CachedEntry


def cache_key(kind: str, url: str) -> str:
    return f"{kind}:{url}"


class ResultCache:
    """
    Thread-safe key/value store with lazy TTL expiry.

    Expired entries are treated as absent on read and dropped; there is no
    background sweep.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at > self._ttl_seconds:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any) -> None:
        entry = CachedEntry(key=key, value=value, stored_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
