"""Document store access: MongoDB client, collection protocol, query parsing."""

from __future__ import annotations

from .client import ConnectionOptions, DocumentStore, parse_connection_args
from .collection import RecordCollection
from .query import parse_filter, parse_sort

__all__ = [
    "ConnectionOptions",
    "DocumentStore",
    "RecordCollection",
    "parse_connection_args",
    "parse_filter",
    "parse_sort",
]
