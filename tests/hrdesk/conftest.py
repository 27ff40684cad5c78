"""Shared test helpers for hrdesk — an in-memory fake backend, no network."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from hrdesk.errors import TransportError


def make_items(n: int, status: str, start: int = 0) -> list[dict[str, Any]]:
    return [{"id": f"{status}-{start + i}", "status": status} for i in range(n)]


def make_logs(n: int) -> list[dict[str, Any]]:
    """Audit-log rows alternating GET and POST."""
    return [{"id": i, "method": "GET" if i % 2 == 0 else "POST"} for i in range(n)]


class FakeBackend:
    """Records every ``(page, limit, filters)`` call and serves pages of *items*.

    ``honors_filters`` — apply ``status=...`` style filters server-side.
    ``fixed_page_size`` — ignore the requested limit and always page by this size.
    ``report_totals`` — include total/totalPages in responses.
    ``honored_fields`` — when set, only these filter keys are applied.
    ``bare_array`` — answer with the page's rows as a plain list, no metadata.
    """

    def __init__(
        self,
        items: list[dict[str, Any]],
        *,
        honors_filters: bool = True,
        fixed_page_size: int | None = None,
        report_totals: bool = True,
        counts: dict[str, int] | None = None,
        fail_on_page: int | None = None,
        honored_fields: set[str] | None = None,
        bare_array: bool = False,
    ) -> None:
        self.items = items
        self.honors_filters = honors_filters
        self.honored_fields = honored_fields
        self.fixed_page_size = fixed_page_size
        self.report_totals = report_totals
        self.counts = counts
        self.fail_on_page = fail_on_page
        self.bare_array = bare_array
        self.calls: list[tuple[int, int, dict[str, str]]] = []

    async def __call__(self, page: int, limit: int, filters: Mapping[str, str]) -> Any:
        self.calls.append((page, limit, dict(filters)))
        if self.fail_on_page is not None and page == self.fail_on_page:
            raise TransportError(f"page {page} failed", status_code=502)

        rows = self.items
        if self.honors_filters:
            for key, value in filters.items():
                if self.honored_fields is not None and key not in self.honored_fields:
                    continue
                rows = [r for r in rows if r.get(key) == value]

        size = self.fixed_page_size or limit
        start = (page - 1) * size
        if self.bare_array:
            return rows[start : start + size]
        body: dict[str, Any] = {"items": rows[start : start + size]}
        if self.report_totals:
            body.update(
                total=len(rows),
                page=page,
                limit=size,
                totalPages=max(1, math.ceil(len(rows) / size)),
            )
        if self.counts is not None:
            body["counts"] = self.counts
        return body
