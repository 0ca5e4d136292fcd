"""
Filter and sort parsing for the interactive commands.

Operators type MongoDB Extended JSON, e.g.::

    find orders {"Status": "open", "Adt.UT": {"$gt": {"$date": "2024-01-01T00:00:00Z"}}}
    sort {"_id": 1}

Both parsers go through ``bson.json_util.loads`` so ``$date``, ``$oid`` and
``$numberLong`` literals become real BSON values before they reach the store.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bson import json_util
from bson.errors import BSONError

from recordcompare.core.errors import QueryParseError

_DIRECTIONS = (1, -1)


def _load_object(text: str, what: str) -> Mapping[str, Any]:
    """Parse ``text`` as a JSON object or raise :class:`QueryParseError`."""
    try:
        value = json_util.loads(text)
    except (ValueError, TypeError, BSONError) as e:
        raise QueryParseError(f"Invalid {what} JSON: {e}") from e
    if not isinstance(value, Mapping):
        raise QueryParseError(f"{what.capitalize()} must be a JSON object, got: {text.strip()}")
    return value


def parse_filter(text: str) -> dict[str, Any]:
    """Parse a filter document, e.g. ``{"EntityId": 42}``."""
    return dict(_load_object(text, "filter"))


def parse_sort(text: str) -> list[tuple[str, int]]:
    """Parse a sort document into ordered ``(field, direction)`` pairs.

    Directions must be ``1`` (ascending) or ``-1`` (descending). ``{}``
    yields an empty list, i.e. natural order.
    """
    spec = _load_object(text, "sort")
    pairs: list[tuple[str, int]] = []
    for field, direction in spec.items():
        if isinstance(direction, bool) or direction not in _DIRECTIONS:
            raise QueryParseError(
                f"Sort direction for '{field}' must be 1 or -1, got: {direction!r}"
            )
        pairs.append((field, int(direction)))
    return pairs


__all__ = ["parse_filter", "parse_sort"]
