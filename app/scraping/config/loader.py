"""
Environment config loader for the collector.
"""

from __future__ import annotations

import os
from functools import lru_cache

from app.config import load_env_files
from app.scraping.config.models import DEFAULT_USER_AGENT, CollectorSettings


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _get_ms_env(name: str, default_ms: float) -> float:
    """
    Read a millisecond duration and return it in seconds.
    """

    return _get_float_env(name, default_ms) / 1000.0


@lru_cache(maxsize=1)
def get_collector_settings() -> CollectorSettings:
    """
    Return cached collector settings from environment variables.
    """

    load_env_files()
    return CollectorSettings(
        respect_robots_txt=_get_bool_env("WEB_INTEL_RESPECT_ROBOTS_TXT", True),
        user_agent=_get_str_env("WEB_INTEL_USER_AGENT", DEFAULT_USER_AGENT),
        request_delay_seconds=max(0.0, _get_ms_env("WEB_INTEL_REQUEST_DELAY_MS", 1000)),
        max_retries=max(0, _get_int_env("WEB_INTEL_MAX_RETRIES", 3)),
        timeout_seconds=max(1.0, _get_ms_env("WEB_INTEL_TIMEOUT_MS", 30000)),
        max_concurrent_requests=max(
            1,
            _get_int_env("WEB_INTEL_MAX_CONCURRENT_REQUESTS", 5),
        ),
        backoff_initial_seconds=max(
            0.0,
            _get_ms_env("WEB_INTEL_BACKOFF_INITIAL_MS", 1000),
        ),
        backoff_multiplier=max(1.0, _get_float_env("WEB_INTEL_BACKOFF_MULTIPLIER", 2.0)),
        backoff_max_seconds=max(0.0, _get_ms_env("WEB_INTEL_BACKOFF_MAX_MS", 5000)),
        robots_timeout_seconds=max(1.0, _get_ms_env("WEB_INTEL_ROBOTS_TIMEOUT_MS", 10000)),
        allow_when_robots_unreachable=_get_bool_env(
            "WEB_INTEL_ALLOW_WHEN_ROBOTS_UNREACHABLE",
            True,
        ),
    )
