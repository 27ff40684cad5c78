"""Adaptive pagination-and-filtering client."""

from hrdesk.pagination.coalescer import RequestCoalescer
from hrdesk.pagination.counts import status_counts
from hrdesk.pagination.estimator import estimate
from hrdesk.pagination.fallback import collect_all, collect_and_filter, paginate_items, walk_pages
from hrdesk.pagination.fetcher import PagedFilteredFetch
from hrdesk.pagination.list_view import ListView
from hrdesk.pagination.models import (
    DROPPED,
    STALE,
    CapabilityVerdict,
    CollectedItems,
    NormalizedResponse,
    Outcome,
    PageMeta,
    PageRequest,
    PageResult,
)
from hrdesk.pagination.normalizer import normalize
from hrdesk.pagination.probe import CapabilityProbe, ProbeCache, ProbeOutcome

__all__ = [
    "DROPPED",
    "STALE",
    "CapabilityProbe",
    "CapabilityVerdict",
    "CollectedItems",
    "ListView",
    "NormalizedResponse",
    "Outcome",
    "PageMeta",
    "PageRequest",
    "PageResult",
    "PagedFilteredFetch",
    "ProbeCache",
    "ProbeOutcome",
    "RequestCoalescer",
    "collect_all",
    "collect_and_filter",
    "estimate",
    "normalize",
    "paginate_items",
    "status_counts",
    "walk_pages",
]
