"""Data models for the pagination core — pure data, no I/O."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """One fetch intent: which page, how many rows, which filters.

    Filters whose value is ``None`` or ``""`` count as absent.
    """

    page: int = 1
    limit: int = 25
    filters: Mapping[str, str | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")
        object.__setattr__(self, "filters", MappingProxyType(dict(self.filters)))

    def active_filters(self) -> dict[str, str]:
        return {k: v for k, v in self.filters.items() if v is not None and v != ""}

    def with_page(self, page: int) -> PageRequest:
        return PageRequest(page=page, limit=self.limit, filters=self.filters)

    def with_filter(self, key: str, value: str | None) -> PageRequest:
        """Return a copy with *key* set (or cleared when *value* is None); resets to page 1."""
        filters = dict(self.filters)
        filters[key] = value
        return PageRequest(page=1, limit=self.limit, filters=filters)


@dataclass
class PageMeta:
    """Pagination metadata; ``None`` means the server did not say."""

    total: int | None = None
    page: int | None = None
    limit: int | None = None
    total_pages: int | None = None
    counts: dict[str, int] | None = None
    server_reported_totals: bool = False


@dataclass
class NormalizedResponse:
    """A raw payload reduced to an item list plus whatever metadata it carried."""

    items: list[Any]
    meta: PageMeta
    shape: str  # which precedence rule matched, for logging


@dataclass
class PageResult(Generic[T]):
    """The uniform page handed to list views.

    ``total_pages`` is a lower-bound estimate unless
    ``server_reported_totals`` is true. ``truncated`` marks a fallback walk
    that hit its safety bound, so totals and counts may undercount.
    """

    items: list[T]
    total: int
    page: int
    limit: int
    total_pages: int
    counts: dict[str, int] | None = None
    server_reported_totals: bool = False
    truncated: bool = False

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def first_index(self) -> int:
        """1-based index of the first row on this page (0 when empty)."""
        if not self.items:
            return 0
        return (self.page - 1) * self.limit + 1

    @property
    def last_index(self) -> int:
        if not self.items:
            return 0
        return self.first_index + len(self.items) - 1


@dataclass(frozen=True)
class CapabilityVerdict:
    """Whether the backend honors a filter field."""

    filter_key: str
    supported: bool


@dataclass
class CollectedItems:
    """Every item pulled by a bounded page walk."""

    items: list[Any]
    pages_fetched: int
    truncated: bool = False
    counts: dict[str, int] | None = None


class Outcome(enum.Enum):
    """Sentinels for fetches that produced no usable result."""

    DROPPED = "dropped"  # another fetch for the same list was in flight
    STALE = "stale"  # a newer fetch started before this one returned


DROPPED = Outcome.DROPPED
STALE = Outcome.STALE
