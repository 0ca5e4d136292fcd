"""Snapshot file naming.

Filename pattern::

    <collection>[-id<record id>][-<YYYYmmdd_HHMMSS_mmm>]-<disambiguator>

- The record id comes from ``_id`` when it is numeric, otherwise from
  ``EntityId`` when that is numeric. String ids are never used, even when
  they look like numbers, so surrogate keys are not confused with natural
  keys.
- The timestamp comes from the audit block (``Adt.UT``) or, failing that,
  from the flat ``SaveTime`` field, rendered in UTC with millisecond precision.
- The disambiguator is one short random token per comparison run, shared by
  every file of that run, so repeated runs against the same collection never
  overwrite each other while the names stay easy to grep.
"""

from __future__ import annotations

import base64
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from bson.decimal128 import Decimal128
from bson.timestamp import Timestamp

ID_FIELD = "_id"
ENTITY_ID_FIELD = "EntityId"
AUDIT_FIELD = "Adt"
AUDIT_UPDATED_FIELD = "UT"
SAVE_TIME_FIELD = "SaveTime"

DISAMBIGUATOR_LENGTH = 4


def new_disambiguator() -> str:
    """Return a fresh 4-character lowercase token for one comparison run."""
    encoded = base64.b64encode(uuid.uuid4().bytes).decode("ascii")
    token = encoded.replace("/", "").replace("+", "").lower()
    return token[:DISAMBIGUATOR_LENGTH]


def is_numeric(value: Any) -> bool:
    """Return True for values stored with a numeric type (``bool`` excluded)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, int | float | Decimal128)


def _format_id(value: Any) -> str:
    # Integral doubles print the way the shell shows them: 2.0 -> "2".
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def record_id(doc: Mapping[str, Any]) -> str | None:
    """Return the printable numeric id of ``doc``, or None when it has none."""
    primary = doc.get(ID_FIELD)
    if is_numeric(primary):
        return _format_id(primary)
    secondary = doc.get(ENTITY_ID_FIELD)
    if is_numeric(secondary):
        return _format_id(secondary)
    return None


def _as_utc(value: Any) -> datetime | None:
    if isinstance(value, Timestamp):
        return value.as_datetime().astimezone(UTC)
    if isinstance(value, datetime):
        # pymongo hands out naive datetimes that are already UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    return None


def updated_at(doc: Mapping[str, Any]) -> datetime | None:
    """Return the record's last-update time in UTC, checking audit before save time."""
    audit = doc.get(AUDIT_FIELD)
    if isinstance(audit, Mapping):
        stamp = _as_utc(audit.get(AUDIT_UPDATED_FIELD))
        if stamp is not None:
            return stamp
    return _as_utc(doc.get(SAVE_TIME_FIELD))


def format_timestamp(stamp: datetime) -> str:
    """Render ``stamp`` as ``YYYYmmdd_HHMMSS_mmm`` (fixed width, sortable)."""
    return f"{stamp:%Y%m%d_%H%M%S}_{stamp.microsecond // 1000:03d}"


def snapshot_name(collection_id: str, doc: Mapping[str, Any], disambiguator: str) -> str:
    """Build the snapshot file stem for ``doc`` exported from ``collection_id``.

    Missing id and timestamp segments are simply skipped, so the result is at
    least ``<collection>-<disambiguator>``.
    """
    name = collection_id

    rid = record_id(doc)
    if rid is not None:
        name += f"-id{rid}"

    stamp = updated_at(doc)
    if stamp is not None:
        name += f"-{format_timestamp(stamp)}"

    return f"{name}-{disambiguator}"


__all__ = [
    "new_disambiguator",
    "is_numeric",
    "record_id",
    "updated_at",
    "format_timestamp",
    "snapshot_name",
]
