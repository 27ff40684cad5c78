"""PagedFilteredFetch — one filtered page from a backend of unknown capability.

Per active filter field the orchestrator moves through::

    Unknown ──probe──▶ Supported    → single paginated+filtered request
                  └──▶ Unsupported  → client-side fallback walk

Requests with no active filter always take the direct path. The only state
kept across calls is the probe cache; no UI state is touched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from hrdesk.core.api_client import PageFetcher
from hrdesk.core.config import MAX_AGGREGATE_PAGES, MAX_FALLBACK_PAGES, WALK_PAGE_SIZE
from hrdesk.pagination.counts import status_counts
from hrdesk.pagination.estimator import estimate
from hrdesk.pagination.fallback import collect_all, collect_and_filter, paginate_items
from hrdesk.pagination.models import NormalizedResponse, PageRequest, PageResult
from hrdesk.pagination.normalizer import normalize
from hrdesk.pagination.predicates import all_of, field_equals
from hrdesk.pagination.probe import CapabilityProbe, PredicateFactory, ProbeCache

log = structlog.get_logger("hrdesk.pagination")


class PagedFilteredFetch:
    """Adaptive page fetcher for a single list view.

    *fetch_page* is ``async (page, limit, filters) -> raw JSON`` and is the
    only I/O this class performs. Transport errors propagate unmodified.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        *,
        entity_keys: Iterable[str] = (),
        predicate_factory: PredicateFactory = field_equals,
        probe_cache: ProbeCache | None = None,
        max_fallback_pages: int = MAX_FALLBACK_PAGES,
        max_aggregate_pages: int = MAX_AGGREGATE_PAGES,
        walk_page_size: int = WALK_PAGE_SIZE,
        count_field: str = "status",
        statuses: Iterable[str] = (),
    ) -> None:
        self._fetch_page = fetch_page
        self._entity_keys = tuple(entity_keys)
        self._predicate_factory = predicate_factory
        self.probe = CapabilityProbe(
            cache=probe_cache,
            predicate_factory=predicate_factory,
            entity_keys=self._entity_keys,
        )
        self._max_fallback_pages = max_fallback_pages
        self._max_aggregate_pages = max_aggregate_pages
        self._walk_page_size = walk_page_size
        self._count_field = count_field
        self._statuses = tuple(statuses)

    @property
    def probe_cache(self) -> ProbeCache:
        return self.probe.cache

    # ── public ─────────────────────────────────────────────────────────────

    async def fetch(self, request: PageRequest) -> PageResult[Any]:
        """Return the requested page, filtering server-side when possible."""
        filters = request.active_filters()
        if not filters:
            return await self._direct(request, filters)

        supported: dict[str, str] = {}
        unsupported: dict[str, str] = {}
        reusable: NormalizedResponse | None = None

        for field, value in filters.items():
            outcome = await self.probe.probe(
                field,
                value,
                lambda f=field, v=value: self._fetch_page(1, request.limit, {f: v}),
            )
            if outcome.verdict.supported:
                supported[field] = value
                if outcome.response is not None:
                    reusable = outcome.response
            else:
                unsupported[field] = value

        if not unsupported:
            # A fresh probe for the only filter on page 1 already fetched this page.
            if request.page == 1 and len(filters) == 1 and reusable is not None:
                log.debug("fetch.probe_reused", filters=filters)
                return self._build_result(request, reusable)
            return await self._direct(request, supported)

        return await self._fallback(request, supported, unsupported)

    async def fetch_counts(self, statuses: Iterable[str] | None = None) -> dict[str, int]:
        """Collection-wide status counts for tab badges.

        Server ``counts`` win; otherwise the whole collection is walked
        (bounded by the aggregate page limit) and counted client-side.
        """
        wanted = tuple(statuses) if statuses is not None else self._statuses
        raw = await self._fetch_page(1, self._walk_page_size, {})
        first = normalize(raw, requested_limit=self._walk_page_size, entity_keys=self._entity_keys)
        if first.meta.counts is not None:
            return status_counts((), wanted, server_counts=first.meta.counts)

        collected = await collect_all(
            self._page_n({}),
            max_pages=self._max_aggregate_pages,
            page_size=self._walk_page_size,
            entity_keys=self._entity_keys,
            first=first,
        )
        if collected.truncated:
            log.warning("counts.truncated", pages=collected.pages_fetched)
        return status_counts(collected.items, wanted, field=self._count_field)

    # ── internal ───────────────────────────────────────────────────────────

    def _page_n(self, filters: Mapping[str, str]):
        async def fetch_page_n(page: int, size: int) -> Any:
            return await self._fetch_page(page, size, filters)

        return fetch_page_n

    async def _direct(self, request: PageRequest, filters: Mapping[str, str]) -> PageResult[Any]:
        raw = await self._fetch_page(request.page, request.limit, dict(filters))
        response = normalize(raw, requested_limit=request.limit, entity_keys=self._entity_keys)
        return self._build_result(request, response)

    def _build_result(self, request: PageRequest, response: NormalizedResponse) -> PageResult[Any]:
        items = response.items

        if response.shape == "array" and len(items) > request.limit:
            # More rows than asked for: the server ignored pagination, so page client-side.
            result = paginate_items(items, request.page, request.limit)
            result.server_reported_totals = True
            log.info("fetch.snapshot", returned=len(items), page=request.page)
            return result

        server_meta = None if response.shape == "array" else response.meta
        meta = estimate(request.page, request.limit, len(items), server_meta)
        if len(items) > request.limit:
            log.warning("fetch.oversized_page", returned=len(items), limit=request.limit)
            items = items[: request.limit]

        log.info(
            "fetch.direct",
            page=meta.page,
            returned=len(items),
            total=meta.total,
            total_pages=meta.total_pages,
            exact=meta.server_reported_totals,
            shape=response.shape,
        )
        return PageResult(
            items=items,
            total=meta.total or 0,
            page=meta.page or request.page,
            limit=request.limit,
            total_pages=meta.total_pages or 1,
            counts=response.meta.counts,
            server_reported_totals=meta.server_reported_totals,
        )

    async def _fallback(
        self,
        request: PageRequest,
        supported: Mapping[str, str],
        unsupported: Mapping[str, str],
    ) -> PageResult[Any]:
        log.info(
            "fetch.fallback",
            server_filters=dict(supported),
            client_filters=dict(unsupported),
            page=request.page,
        )
        predicate = all_of(
            [self._predicate_factory(field, value) for field, value in unsupported.items()]
        )
        return await collect_and_filter(
            predicate,
            request.page,
            request.limit,
            self._page_n(supported),
            self._max_fallback_pages,
            walk_page_size=self._walk_page_size,
            entity_keys=self._entity_keys,
            count_field=self._count_field if self._statuses else None,
            statuses=self._statuses,
        )
