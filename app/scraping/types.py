"""
Shared collector data models.

Every record is a frozen dataclass; ordered collections are tuples so a record
can be handed to concurrent callers and cached without copying.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Generic, Literal, TypeVar

T = TypeVar("T")

ChangeType = Literal["content", "structure", "metadata", "pricing", "product"]
PricingInterval = Literal["monthly", "yearly", "one-time"]
ProductStatus = Literal["active", "deprecated", "beta", "coming-soon"]
JobType = Literal["full-time", "part-time", "contract", "internship"]
StrategicImportance = Literal["low", "medium", "high", "critical"]

JOB_KINDS: tuple[str, ...] = ("website", "pricing", "products", "jobs")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def freeze(value: Any) -> Any:
    """
    Recursively turn dicts into read-only mappings and lists into tuples.
    """

    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def to_plain(value: Any) -> Any:
    """
    Convert records (and frozen containers) back into dicts and lists for JSON.
    """

    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_plain(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


@dataclass(frozen=True)
class FetchResult:
    """
    Raw outcome of one successful HTTP GET.
    """

    url: str
    status_code: int
    body: str
    elapsed_seconds: float


@dataclass(frozen=True)
class ScrapingResult(Generic[T]):
    """
    Uniform envelope returned by every public collector operation.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    retry_count: int = 0
    response_time: float = 0.0
    cached: bool = False

    def __post_init__(self) -> None:
        if self.success and (self.data is None or self.error is not None):
            raise ValueError("A successful result needs data and no error.")
        if not self.success and (self.data is not None or not self.error):
            raise ValueError("A failed result needs an error and no data.")

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        retry_count: int = 0,
        response_time: float = 0.0,
        cached: bool = False,
    ) -> "ScrapingResult[T]":
        return cls(
            success=True,
            data=data,
            retry_count=retry_count,
            response_time=response_time,
            cached=cached,
        )

    @classmethod
    def fail(
        cls,
        error: str,
        *,
        retry_count: int = 0,
        response_time: float = 0.0,
    ) -> "ScrapingResult[T]":
        return cls(
            success=False,
            error=error or "Unknown scraping error",
            retry_count=retry_count,
            response_time=response_time,
        )


@dataclass(frozen=True)
class PageSummary:
    """
    Metadata pulled out of a page before it becomes a WebsiteData snapshot.
    """

    title: str | None
    description: str | None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WebsiteData:
    """
    Normalized snapshot of one fetched page.
    """

    url: str
    content: str
    scraped_at: datetime
    response_time: float
    status_code: int
    title: str | None = None
    description: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", freeze(self.metadata))


@dataclass(frozen=True)
class ChangeRecord:
    url: str
    change_type: ChangeType
    old_value: str | None
    new_value: str | None
    confidence: float
    detected_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class PricingPlan:
    name: str
    price: Decimal
    interval: PricingInterval
    features: tuple[str, ...] = ()
    is_popular: bool = False


@dataclass(frozen=True)
class PricingSnapshot:
    url: str
    plans: tuple[PricingPlan, ...]
    currency: str
    last_updated: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class ProductRecord:
    name: str
    description: str | None = None
    category: str | None = None
    features: tuple[str, ...] = ()
    status: ProductStatus = "active"
    launched_at: datetime | None = None


@dataclass(frozen=True)
class ProductSnapshot:
    url: str
    products: tuple[ProductRecord, ...]
    categories: tuple[str, ...] = ()
    last_updated: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class JobPosting:
    title: str
    type: JobType
    remote: bool
    description: str
    posted_at: datetime
    url: str
    strategic_importance: StrategicImportance
    department: str | None = None
    location: str | None = None
    requirements: tuple[str, ...] = ()


@dataclass(frozen=True)
class CachedEntry:
    """
    One Result Cache slot. Replaced on write, never updated in place.
    """

    key: str
    value: Any
    stored_at: float
