"""Best-effort page totals when the server omits them.

Known limitation: a full page is taken to mean another page *might* follow.
When the true total is an exact multiple of the page size, the last real page
is reported as "possibly not last" (one phantom extra page) until the empty
page after it is actually requested.
"""

from __future__ import annotations

import math

from hrdesk.pagination.models import PageMeta


def estimate(
    requested_page: int,
    requested_limit: int,
    items_returned: int,
    server_meta: PageMeta | None = None,
) -> PageMeta:
    """Return ``{total, page, limit, total_pages}`` for one fetched page.

    Server-reported ``total`` *and* ``total_pages`` are trusted verbatim.
    Otherwise totals are derived from how full the page came back.
    """
    if requested_page < 1 or requested_limit < 1:
        raise ValueError("requested_page and requested_limit must be >= 1")

    counts = server_meta.counts if server_meta is not None else None

    if (
        server_meta is not None
        and server_meta.total is not None
        and server_meta.total_pages is not None
    ):
        return PageMeta(
            total=server_meta.total,
            page=server_meta.page or requested_page,
            limit=requested_limit,
            total_pages=server_meta.total_pages,
            counts=counts,
            server_reported_totals=True,
        )

    if server_meta is not None and server_meta.total is not None:
        # Total without a page count: derive pages, but still an estimate.
        total = server_meta.total
        return PageMeta(
            total=total,
            page=requested_page,
            limit=requested_limit,
            total_pages=max(1, math.ceil(total / requested_limit)),
            counts=counts,
        )

    has_more = items_returned >= requested_limit
    if has_more:
        total = requested_page * requested_limit
        total_pages = requested_page + 1
    else:
        total = (requested_page - 1) * requested_limit + items_returned
        total_pages = requested_page

    return PageMeta(
        total=total,
        page=requested_page,
        limit=requested_limit,
        total_pages=max(1, total_pages),
        counts=counts,
    )
