"""Status-count aggregation for list-screen tab badges."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from hrdesk.pagination.predicates import item_value, normalize_value


def status_counts(
    items: Iterable[Any],
    statuses: Iterable[str],
    field: str = "status",
    server_counts: Mapping[str, int] | None = None,
) -> dict[str, int]:
    """Return ``{"total": n, <status>: n, ...}``.

    Server-computed *server_counts* are authoritative and returned as-is
    (``total`` filled from the sum when missing). Otherwise every item is
    counted by its normalized *field* value. Each requested status is always
    present, zero when unseen.
    """
    wanted = [normalize_value(s) or "" for s in statuses]

    if server_counts is not None:
        counts = {str(k): int(v) for k, v in server_counts.items()}
        for status in wanted:
            counts.setdefault(status, 0)
        if "total" not in counts:
            counts["total"] = sum(v for k, v in counts.items() if k != "total")
        return counts

    tally: Counter[str] = Counter()
    total = 0
    for item in items:
        total += 1
        value = normalize_value(item_value(item, field))
        if value is not None:
            tally[value] += 1

    counts = {"total": total}
    for status in wanted:
        counts[status] = tally.get(status, 0)
    return counts
