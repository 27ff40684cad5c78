"""Reduce an arbitrary backend payload to ``(items, PageMeta)``.

Shapes are tried in a fixed order, first match wins:

1. ``{"items": [...], total, page, limit, totalPages, counts?}``
2. ``{"data": [...], ...}``
3. ``{"results": [...], ...}``
4. ``[...]`` — a bare array, described as a single-page snapshot; the
   fetcher and page walk decide from its length whether it really is one
5. ``{<entityKey>: [...], ...}`` — e.g. ``assets``, ``assetRequests``
6. the first list-valued property of the object
7. nothing list-like — an empty, single-page result

Structured shapes are preferred over the generic fallback so metadata is not
lost when an unrelated array (``departments``, ``errors``) sits beside the
real items. Never raises for well-formed JSON.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from hrdesk.pagination.models import NormalizedResponse, PageMeta

log = structlog.get_logger("hrdesk.pagination")

_PRIMARY_KEYS = ("items", "data", "results")

# camelCase first, then the snake_case spelling some endpoints use.
_META_ALIASES: dict[str, tuple[str, ...]] = {
    "total": ("total", "totalCount", "total_count", "count"),
    "page": ("page", "currentPage", "current_page"),
    "limit": ("limit", "pageSize", "page_size", "perPage", "per_page"),
    "total_pages": ("totalPages", "total_pages", "pages"),
}

_NESTED_META_KEYS = ("pagination", "meta")


def normalize(
    raw: Any,
    requested_limit: int | None = None,
    entity_keys: Iterable[str] = (),
) -> NormalizedResponse:
    """Extract items and pagination metadata from *raw*."""
    if isinstance(raw, Mapping):
        for key in _PRIMARY_KEYS:
            value = raw.get(key)
            if isinstance(value, list):
                return NormalizedResponse(items=value, meta=_extract_meta(raw), shape=key)

    if isinstance(raw, list):
        n = len(raw)
        return NormalizedResponse(
            items=raw,
            meta=PageMeta(
                total=n,
                page=1,
                limit=n,
                total_pages=1,
                server_reported_totals=True,
            ),
            shape="array",
        )

    if isinstance(raw, Mapping):
        for key in entity_keys:
            value = raw.get(key)
            if isinstance(value, list):
                return NormalizedResponse(items=value, meta=_extract_meta(raw), shape=key)

        for key, value in raw.items():
            if isinstance(value, list):
                log.debug("normalize.fallback_array", key=key)
                return NormalizedResponse(
                    items=value, meta=_extract_meta(raw), shape=f"fallback:{key}"
                )

    log.debug("normalize.no_array", payload_type=type(raw).__name__)
    return NormalizedResponse(
        items=[],
        meta=PageMeta(total=0, page=1, limit=requested_limit, total_pages=1),
        shape="empty",
    )


def _extract_meta(raw: Mapping[str, Any]) -> PageMeta:
    """Read pagination fields from *raw*, falling back to a nested object."""
    sources: list[Mapping[str, Any]] = [raw]
    for key in _NESTED_META_KEYS:
        nested = raw.get(key)
        if isinstance(nested, Mapping):
            sources.append(nested)

    values: dict[str, int | None] = {}
    for name, aliases in _META_ALIASES.items():
        values[name] = None
        for source in sources:
            found = _first_int(source, aliases)
            if found is not None:
                values[name] = found
                break

    counts = None
    for source in sources:
        counts = _coerce_counts(source.get("counts"))
        if counts is not None:
            break

    return PageMeta(
        total=values["total"],
        page=values["page"],
        limit=values["limit"],
        total_pages=values["total_pages"],
        counts=counts,
    )


def _first_int(source: Mapping[str, Any], aliases: tuple[str, ...]) -> int | None:
    for alias in aliases:
        value = _coerce_int(source.get(alias))
        if value is not None:
            return value
    return None


def _coerce_int(value: Any) -> int | None:
    """Non-negative int from an int, integral float, or numeric string."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
        return parsed if parsed >= 0 else None
    return None


def _coerce_counts(value: Any) -> dict[str, int] | None:
    if not isinstance(value, Mapping):
        return None
    counts: dict[str, int] = {}
    for key, raw_count in value.items():
        count = _coerce_int(raw_count)
        if count is not None:
            counts[str(key)] = count
    return counts
