"""Structural type for the collections the comparison engine reads from.

``pymongo.collection.Collection`` satisfies this protocol as-is; tests use a
small in-memory implementation instead of a live server.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol


class RecordCollection(Protocol):
    """The subset of a MongoDB collection used by the REPL and the driver."""

    @property
    def name(self) -> str: ...

    def count_documents(self, filter: Mapping[str, Any]) -> int: ...

    def find(
        self,
        filter: Mapping[str, Any] | None = None,
        sort: Sequence[tuple[str, int]] | None = None,
        limit: int = 0,
    ) -> Iterable[Mapping[str, Any]]: ...
