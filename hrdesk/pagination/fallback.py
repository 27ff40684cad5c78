"""Client-side fallback: walk every backend page, filter, re-paginate.

Pages are fetched strictly one after another, never concurrently, so backend
load stays bounded and the accumulated order is deterministic. A failed page
request fails the whole walk; an incomplete filtered view is never returned.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import structlog

from hrdesk.core.config import MAX_AGGREGATE_PAGES, MAX_FALLBACK_PAGES, WALK_PAGE_SIZE
from hrdesk.pagination.counts import status_counts
from hrdesk.pagination.models import CollectedItems, NormalizedResponse, PageResult
from hrdesk.pagination.normalizer import normalize
from hrdesk.pagination.predicates import Predicate

log = structlog.get_logger("hrdesk.pagination")

FetchPageN = Callable[[int, int], Awaitable[Any]]


async def walk_pages(
    fetch_page_n: FetchPageN,
    *,
    page_size: int,
    max_pages: int,
    entity_keys: Iterable[str] = (),
    first: NormalizedResponse | None = None,
) -> CollectedItems:
    """Fetch pages ``1..max_pages`` in order and concatenate their items.

    Stops on an empty page, a short page, or once the server-reported
    ``totalPages`` is reached. A server that reports its own ``limit`` is
    judged against that size rather than *page_size*. Hitting *max_pages*
    while more data may follow sets ``truncated``.

    Bare arrays carry no page size, so the length of the first one is taken
    as the server's size. An array longer than *page_size* is the whole
    collection, and an array repeating the previous page means the page
    number was ignored. *first*, when given, stands in for page 1.

    ``counts`` keeps the first page's server-reported counts, if any.
    """
    if max_pages < 1:
        raise ValueError("max_pages must be >= 1")
    entity_keys = tuple(entity_keys)

    items: list[Any] = []
    counts: dict[str, int] | None = None
    array_size: int | None = None
    previous: list[Any] | None = None
    page = 0
    more = True
    while more and page < max_pages:
        page += 1
        if page == 1 and first is not None:
            response = first
        else:
            raw = await fetch_page_n(page, page_size)
            response = normalize(raw, requested_limit=page_size, entity_keys=entity_keys)
        batch = response.items
        meta = response.meta
        if page == 1:
            counts = meta.counts

        if response.shape == "array" and batch and batch == previous:
            log.debug("fallback.repeated_page", page=page)
            more = False
            continue
        items.extend(batch)
        previous = batch

        if not batch:
            more = False
        elif response.shape == "array":
            if page == 1:
                array_size = len(batch)
                more = len(batch) <= page_size
            else:
                more = len(batch) >= (array_size or page_size)
        elif meta.total_pages is not None:
            more = page < meta.total_pages
        else:
            more = len(batch) >= (meta.limit or page_size)

    truncated = more and page >= max_pages
    if truncated:
        log.warning(
            "fallback.truncated",
            max_pages=max_pages,
            page_size=page_size,
            collected=len(items),
        )
    else:
        log.debug("fallback.walk_complete", pages=page, collected=len(items))
    return CollectedItems(items=items, pages_fetched=page, truncated=truncated, counts=counts)


async def collect_and_filter(
    predicate: Predicate,
    requested_page: int,
    requested_limit: int,
    fetch_page_n: FetchPageN,
    max_pages: int = MAX_FALLBACK_PAGES,
    *,
    walk_page_size: int = WALK_PAGE_SIZE,
    entity_keys: Iterable[str] = (),
    count_field: str | None = None,
    statuses: Iterable[str] = (),
) -> PageResult[Any]:
    """Return page *requested_page* of the items matching *predicate*.

    Totals and page count describe the filtered collection. ``counts`` are
    the server's own when the first walked page carries them; otherwise, when
    *count_field* is given, they tally the unfiltered walk by that field so
    status badges stay collection-wide.
    """
    if requested_page < 1 or requested_limit < 1:
        raise ValueError("requested_page and requested_limit must be >= 1")

    collected = await walk_pages(
        fetch_page_n,
        page_size=walk_page_size,
        max_pages=max_pages,
        entity_keys=entity_keys,
    )
    filtered_all = [item for item in collected.items if predicate(item)]
    result = paginate_items(filtered_all, requested_page, requested_limit)
    result.truncated = collected.truncated
    if collected.counts is not None:
        result.counts = status_counts((), statuses, server_counts=collected.counts)
    elif count_field is not None:
        result.counts = status_counts(collected.items, statuses, field=count_field)

    log.info(
        "fallback.filtered",
        scanned=len(collected.items),
        matched=len(filtered_all),
        pages_walked=collected.pages_fetched,
        page=requested_page,
        truncated=collected.truncated,
    )
    return result


async def collect_all(
    fetch_page_n: FetchPageN,
    *,
    max_pages: int = MAX_AGGREGATE_PAGES,
    page_size: int = 50,
    entity_keys: Iterable[str] = (),
    first: NormalizedResponse | None = None,
) -> CollectedItems:
    """Pull every item of a collection, e.g. for cross-referencing another list."""
    return await walk_pages(
        fetch_page_n,
        page_size=page_size,
        max_pages=max_pages,
        entity_keys=entity_keys,
        first=first,
    )


def paginate_items(items: list[Any], page: int, limit: int) -> PageResult[Any]:
    """Slice an in-memory collection into one page with exact totals.

    An empty collection still has one (empty) page.
    """
    total = len(items)
    start = (page - 1) * limit
    return PageResult(
        items=items[start : start + limit],
        total=total,
        page=page,
        limit=limit,
        total_pages=max(1, math.ceil(total / limit)),
        server_reported_totals=False,
    )
