"""Registry of the dashboard's paginated list endpoints."""

from __future__ import annotations

from dataclasses import dataclass

from hrdesk.core.api_client import ApiClient
from hrdesk.core.config import Settings
from hrdesk.errors import UnknownCollectionError
from hrdesk.pagination.fetcher import PagedFilteredFetch
from hrdesk.pagination.list_view import ListView
from hrdesk.pagination.models import PageRequest


@dataclass(frozen=True)
class Collection:
    """One list endpoint and how its items are keyed and counted."""

    name: str
    path: str
    entity_keys: tuple[str, ...] = ()
    status_field: str = "status"
    statuses: tuple[str, ...] = ()


COLLECTIONS: dict[str, Collection] = {
    c.name: c
    for c in (
        Collection(
            name="assets",
            path="/assets",
            entity_keys=("assets",),
            statuses=("available", "assigned", "under_maintenance", "retired"),
        ),
        Collection(
            name="asset-requests",
            path="/asset-requests",
            entity_keys=("assetRequests", "requests"),
            statuses=("pending", "approved", "rejected", "cancelled"),
        ),
        Collection(
            name="promotions",
            path="/promotions",
            entity_keys=("promotions",),
            statuses=("pending", "approved", "rejected"),
        ),
        Collection(
            name="performance-reviews",
            path="/performance-reviews",
            entity_keys=("performanceReviews", "reviews"),
            statuses=("under_review", "completed"),
        ),
        Collection(
            name="system-logs",
            path="/system/logs",
            entity_keys=("logs",),
            status_field="method",
            statuses=("get", "post", "put", "patch", "delete"),
        ),
        Collection(
            name="timesheets",
            path="/timesheet",
            entity_keys=("timesheets", "entries"),
        ),
    )
}


def get_collection(name: str) -> Collection:
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise UnknownCollectionError(name, sorted(COLLECTIONS)) from None


def build_fetcher(
    client: ApiClient, collection: Collection, settings: Settings
) -> PagedFilteredFetch:
    """Wire a :class:`PagedFilteredFetch` for *collection* with a fresh probe cache."""
    return PagedFilteredFetch(
        client.page_fetcher(collection.path),
        entity_keys=collection.entity_keys,
        max_fallback_pages=settings.max_fallback_pages,
        max_aggregate_pages=settings.max_aggregate_pages,
        walk_page_size=settings.walk_page_size,
        count_field=collection.status_field,
        statuses=collection.statuses,
    )


def open_list_view(
    client: ApiClient,
    name: str,
    settings: Settings,
    filters: dict[str, str | None] | None = None,
) -> ListView:
    """Create the per-screen state for collection *name*, positioned on page 1."""
    collection = get_collection(name)
    request = PageRequest(page=1, limit=settings.default_page_size, filters=filters or {})
    return ListView(collection.name, build_fetcher(client, collection, settings), request)
