"""One in-flight fetch per list, plus stale-result detection.

A fetch that arrives while another is running for the same list is dropped,
not queued: the caller re-triggers on its next state change. Every accepted
fetch is stamped with a monotonically increasing token; a result whose token
is no longer the latest is stale and must be discarded by the consumer.
There is no network cancellation. Tokens are the only staleness mechanism.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from hrdesk.pagination.models import DROPPED, Outcome

log = structlog.get_logger("hrdesk.pagination")

R = TypeVar("R")


class RequestCoalescer:
    """Per-list in-flight flag and token counter.

    Single-threaded asyncio only; state changes between awaits are atomic.
    """

    def __init__(self, name: str = "list") -> None:
        self.name = name
        self._in_flight = False
        self._latest = 0
        self.dropped = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def latest_token(self) -> int:
        return self._latest

    def begin_fetch(self) -> int | None:
        """Claim the list for a fetch; ``None`` if one is already running."""
        if self._in_flight:
            self.dropped += 1
            log.debug("coalescer.dropped", list=self.name, in_flight_token=self._latest)
            return None
        self._in_flight = True
        self._latest += 1
        return self._latest

    def end_fetch(self, token: int) -> None:
        # Released even when invalidate() bumped the counter mid-flight.
        self._in_flight = False
        log.debug("coalescer.released", list=self.name, token=token, stale=self.is_stale(token))

    def is_stale(self, token: int) -> bool:
        return token != self._latest

    def invalidate(self) -> None:
        """Mark any in-flight result stale (e.g. the filter changed)."""
        self._latest += 1

    async def run(self, factory: Callable[[], Awaitable[R]]) -> tuple[int, R] | Outcome:
        """Run ``factory()`` unless a fetch is in flight.

        Returns ``(token, result)``, or ``DROPPED`` without calling *factory*.
        The in-flight flag is released even when *factory* raises.
        """
        token = self.begin_fetch()
        if token is None:
            return DROPPED
        try:
            result = await factory()
        finally:
            self.end_fetch(token)
        return token, result
