"""Capability probe — does the backend actually honor a filter parameter?

One page-1 request is issued with the filter applied. If every returned item
satisfies the filter, the server is assumed to filter on that field. An empty
page is inconclusive and accepted as supported, so a filter that legitimately
matches nothing never triggers a full-collection scan.

Verdicts are cached per field, not per value: a backend is assumed to
implement a filter parameter for all of its values or for none.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any

import structlog

from hrdesk.pagination.models import CapabilityVerdict, NormalizedResponse
from hrdesk.pagination.normalizer import normalize
from hrdesk.pagination.predicates import Predicate, field_equals

log = structlog.get_logger("hrdesk.pagination")

PredicateFactory = Callable[[str, str], Predicate]
FetchPage1 = Callable[[], Awaitable[Any]]


class ProbeCache:
    """Append-only map of filter field → verdict for one list view."""

    def __init__(self) -> None:
        self._verdicts: dict[str, CapabilityVerdict] = {}

    def get(self, field: str) -> CapabilityVerdict | None:
        return self._verdicts.get(field)

    def record(self, verdict: CapabilityVerdict) -> None:
        # Verdicts are never revoked once learned.
        self._verdicts.setdefault(verdict.filter_key, verdict)

    def clear(self) -> None:
        self._verdicts.clear()

    def __contains__(self, field: object) -> bool:
        return field in self._verdicts

    def __iter__(self) -> Iterator[CapabilityVerdict]:
        return iter(list(self._verdicts.values()))

    def __len__(self) -> int:
        return len(self._verdicts)


@dataclass
class ProbeOutcome:
    """A verdict plus the page-1 response that produced it (None on cache hit)."""

    verdict: CapabilityVerdict
    response: NormalizedResponse | None = None

    @property
    def cached(self) -> bool:
        return self.response is None


class CapabilityProbe:
    """Run and cache per-field filter capability checks."""

    def __init__(
        self,
        cache: ProbeCache | None = None,
        predicate_factory: PredicateFactory = field_equals,
        entity_keys: tuple[str, ...] = (),
    ) -> None:
        self.cache = cache if cache is not None else ProbeCache()
        self._predicate_factory = predicate_factory
        self._entity_keys = entity_keys
        self.probes_issued = 0

    async def probe(self, field: str, value: str, fetch_page1: FetchPage1) -> ProbeOutcome:
        """Return the verdict for *field*, issuing a request only on a cache miss."""
        cached = self.cache.get(field)
        if cached is not None:
            return ProbeOutcome(verdict=cached)

        raw = await fetch_page1()
        self.probes_issued += 1
        response = normalize(raw, entity_keys=self._entity_keys)
        predicate = self._predicate_factory(field, value)

        mismatched = sum(1 for item in response.items if not predicate(item))
        supported = mismatched == 0
        verdict = CapabilityVerdict(filter_key=field, supported=supported)
        self.cache.record(verdict)

        log.info(
            "probe.verdict",
            field=field,
            value=value,
            supported=supported,
            returned=len(response.items),
            mismatched=mismatched,
            inconclusive=not response.items,
        )
        return ProbeOutcome(verdict=verdict, response=response)
