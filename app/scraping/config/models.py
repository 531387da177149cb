"""
Collector configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_USER_AGENT = "WebIntelCollector/1.0 (+https://example.com/bot)"
CACHE_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class CollectorSettings:
    """
    Runtime settings for one collector instance.

    Durations are in seconds; the environment loader accepts milliseconds.
    """

    respect_robots_txt: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    request_delay_seconds: float = 1.0
    max_retries: int = 3
    timeout_seconds: float = 30.0
    max_concurrent_requests: int = 5
    backoff_initial_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    backoff_max_seconds: float = 5.0
    robots_timeout_seconds: float = 10.0
    allow_when_robots_unreachable: bool = True
    url_check_timeout_seconds: float = 5.0
