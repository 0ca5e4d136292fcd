"""
Canonical serializer for exported records.

Two records that hold the same data but were stored with a different field
insertion order must produce byte-identical snapshot text, otherwise the
external diff viewer reports noise instead of changes. This module provides:

- ``classify(value)``: tag a document value with its :data:`ValueKind`.
- ``canonicalize(doc)``: a new document with fields sorted at every nesting level.
- ``render(doc)``: pretty-printed MongoDB Extended JSON (relaxed mode).
- ``canonical_text(doc)``: the two steps combined, as written to disk.

Only object-typed values are reordered. Arrays keep their members in stored
order (and objects inside arrays keep their field order), since array order
is data, not presentation.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from bson import json_util
from bson.decimal128 import Decimal128
from bson.timestamp import Timestamp

ValueKind = Literal[
    "null",
    "boolean",
    "number",
    "string",
    "timestamp",
    "document",
    "array",
    "other",
]

Document = Mapping[str, Any]

# Relaxed Extended JSON keeps numbers as plain JSON numbers and dates as
# ISO-8601 strings in UTC, which is what an operator wants to read in a diff.
_JSON_OPTIONS = json_util.RELAXED_JSON_OPTIONS


def classify(value: Any) -> ValueKind:
    """Return the tagged kind of a document value.

    ``bool`` is checked before numbers because it is an ``int`` subclass.
    Driver-specific scalars (``ObjectId``, ``bytes``, regexes, ...) fall into
    ``"other"`` so the function never fails on a value the store can return.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float | Decimal128):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, datetime | Timestamp):
        return "timestamp"
    if isinstance(value, Mapping):
        return "document"
    if isinstance(value, list | tuple):
        return "array"
    return "other"


def canonicalize(doc: Document) -> dict[str, Any]:
    """Return a copy of ``doc`` with fields ordered by name at every level.

    Nested documents are canonicalized first; every other value, arrays
    included, is carried over unchanged. The input is never modified.
    """
    out: dict[str, Any] = {}
    for name in sorted(doc.keys()):
        value = doc[name]
        kind = classify(value)
        if kind == "document":
            out[name] = canonicalize(value)
        elif kind in ("null", "boolean", "number", "string", "timestamp", "array", "other"):
            out[name] = value
        else:  # pragma: no cover - ValueKind is closed
            raise AssertionError(f"unhandled value kind: {kind}")
    return out


def render(doc: Document) -> str:
    """Render ``doc`` as indented Extended JSON, keeping its key order."""
    text = json_util.dumps(doc, json_options=_JSON_OPTIONS, indent=2, ensure_ascii=False)
    return text + "\n"


def canonical_text(doc: Document) -> str:
    """Return the snapshot text for ``doc``: canonicalized, then rendered."""
    return render(canonicalize(doc))


__all__ = ["ValueKind", "Document", "classify", "canonicalize", "render", "canonical_text"]
