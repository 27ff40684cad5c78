"""ListView — the state one list screen owns for its lifetime."""

from __future__ import annotations

from typing import Any

import structlog

from hrdesk.pagination.coalescer import RequestCoalescer
from hrdesk.pagination.fetcher import PagedFilteredFetch
from hrdesk.pagination.models import DROPPED, STALE, Outcome, PageRequest, PageResult

log = structlog.get_logger("hrdesk.pagination")


class ListView:
    """Fetcher + coalescer + current request/result for a single list.

    :meth:`load` returns the accepted :class:`PageResult`, ``DROPPED`` when
    another load was still running, or ``STALE`` when a newer request was
    made (e.g. the filter changed) before this one returned.
    """

    def __init__(self, name: str, fetcher: PagedFilteredFetch, request: PageRequest) -> None:
        self.name = name
        self.fetcher = fetcher
        self.coalescer = RequestCoalescer(name)
        self.request = request
        self.result: PageResult[Any] | None = None

    async def load(self, request: PageRequest | None = None) -> PageResult[Any] | Outcome:
        if request is not None:
            self.request = request
        target = self.request

        outcome = await self.coalescer.run(lambda: self.fetcher.fetch(target))
        if outcome is DROPPED:
            return DROPPED
        token, result = outcome
        if self.coalescer.is_stale(token):
            log.info("list.stale_discarded", list=self.name, token=token)
            return STALE
        self.result = result
        return result

    async def set_page(self, page: int) -> PageResult[Any] | Outcome:
        return await self.load(self.request.with_page(page))

    async def set_filter(self, key: str, value: str | None) -> PageResult[Any] | Outcome:
        """Change one filter; any load still in flight becomes stale."""
        self.coalescer.invalidate()
        self.request = self.request.with_filter(key, value)
        return await self.load()

    def close(self) -> None:
        """Tear down: probe verdicts do not outlive the screen."""
        self.fetcher.probe_cache.clear()
        self.result = None
