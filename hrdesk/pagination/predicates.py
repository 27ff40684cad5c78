"""Client-side filter predicates over raw item dicts."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

Predicate = Callable[[Any], bool]

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def normalize_value(value: Any) -> str | None:
    """Lower-cased, trimmed string form used for comparisons."""
    if value is None:
        return None
    return str(value).strip().lower()


def item_value(item: Any, field: str) -> Any:
    """Look up *field* on *item*, trying snake_case and camelCase spellings.

    Dotted paths (``category.name``) descend into nested objects.
    """
    if "." in field:
        head, tail = field.split(".", 1)
        return item_value(item_value(item, head), tail)
    if not isinstance(item, Mapping):
        return None
    for key in (field, _to_snake(field), _to_camel(field)):
        if key in item:
            return item[key]
    return None


def field_equals(field: str, value: str) -> Predicate:
    """Predicate: ``item[field]`` equals *value* (case/whitespace-insensitive)."""
    expected = normalize_value(value)

    def predicate(item: Any) -> bool:
        return normalize_value(item_value(item, field)) == expected

    return predicate


def all_of(predicates: list[Predicate]) -> Predicate:
    def predicate(item: Any) -> bool:
        return all(p(item) for p in predicates)

    return predicate
