"""
Interactive session state.

A :class:`SessionState` is created once by the CLI and handed to every command
handler. It tracks three things:

- the active collection (``None`` until the first ``find``),
- the active filter (``None`` means "match all"),
- the active sort specification (``None`` means natural order).

Each of them is replaced wholesale, never merged. Selecting another collection
keeps the current filter and sort; the operator resets them explicitly with
``find <collection> {}`` and ``sort {}``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from bson import json_util

from recordcompare.store.collection import RecordCollection

SortSpec = list[tuple[str, int]]


class SessionState:
    """Mutable cursor over {collection, filter, sort} for one REPL session."""

    __slots__ = ("collection", "filter", "sort")

    def __init__(self) -> None:
        self.collection: RecordCollection | None = None
        self.filter: dict[str, Any] | None = None
        self.sort: SortSpec | None = None

    # ------------------------------- Mutation -------------------------------

    def select(self, collection: RecordCollection) -> None:
        """Make ``collection`` the active one; filter and sort are kept."""
        self.collection = collection

    def deselect(self) -> None:
        """Drop the active collection (e.g. after switching to a server without a database)."""
        self.collection = None

    def set_filter(self, query: Mapping[str, Any] | None) -> None:
        """Replace the active filter (``None`` clears it)."""
        self.filter = dict(query) if query is not None else None

    def set_sort(self, sort: Sequence[tuple[str, int]] | None) -> None:
        """Replace the active sort specification.

        An empty sequence is stored as ``None`` so ``sort {}`` returns to
        natural order.
        """
        self.sort = list(sort) if sort else None

    # ------------------------------- Queries --------------------------------

    @property
    def collection_name(self) -> str | None:
        return self.collection.name if self.collection is not None else None

    def effective_filter(self) -> dict[str, Any]:
        """Return the filter to send to the store (``{}`` when unset)."""
        return dict(self.filter) if self.filter is not None else {}

    def effective_sort(self) -> SortSpec | None:
        """Return the sort to send to the store (``None`` for natural order)."""
        return list(self.sort) if self.sort else None

    def describe(self) -> list[str]:
        """Return the ``Collection:`` / ``Query:`` / ``Sort:`` status lines."""
        query = json_util.dumps(self.filter) if self.filter is not None else ""
        sort = json_util.dumps(dict(self.sort)) if self.sort else ""
        return [
            f"Collection: {self.collection_name or ''}",
            f"Query: {query}",
            f"Sort: {sort}",
        ]


__all__ = ["SessionState", "SortSpec"]
