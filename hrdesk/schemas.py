"""Pydantic wire models for JSON output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from hrdesk.pagination.models import PageResult


class PageMetaSchema(BaseModel):
    """Pagination metadata; ``estimated`` pages are a lower bound."""

    total: int
    page: int
    limit: int
    total_pages: int
    server_reported_totals: bool
    truncated: bool = False
    counts: dict[str, int] | None = None


class PaginatedResponse(BaseModel):
    """One page of a list, as printed by ``hrdesk list``."""

    data: list[Any]
    meta: PageMetaSchema

    @classmethod
    def from_result(cls, result: PageResult[Any]) -> PaginatedResponse:
        return cls(
            data=list(result.items),
            meta=PageMetaSchema(
                total=result.total,
                page=result.page,
                limit=result.limit,
                total_pages=result.total_pages,
                server_reported_totals=result.server_reported_totals,
                truncated=result.truncated,
                counts=result.counts,
            ),
        )


class StatusCountsResponse(BaseModel):
    collection: str
    counts: dict[str, int]
