"""Pytest configuration and shared fixtures for the RecordCompare tests.

No test talks to a live MongoDB server: collections and stores are small
in-memory stand-ins implementing the same methods the code calls on
``pymongo`` objects. Console output is captured in a ``StringIO`` and operator
input is scripted through a ``StringIO`` stream.
"""

from __future__ import annotations

import io
from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from recordcompare.console import ConsolePrompter
from recordcompare.core.errors import ConfigurationError
from recordcompare.core.snapshots import SnapshotDirectory
from recordcompare.store.client import ConnectionOptions


def _matches(doc: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
    """Top-level equality matching; enough for the filters used in tests."""
    return all(doc.get(key) == value for key, value in query.items())


class FakeCollection:
    """In-memory collection with the pymongo call shapes we rely on."""

    def __init__(self, name: str, docs: Sequence[Mapping[str, Any]] = ()) -> None:
        self.name = name
        self.docs = [dict(d) for d in docs]
        self.yielded = 0
        self.find_calls: list[dict[str, Any]] = []

    def count_documents(self, filter: Mapping[str, Any]) -> int:
        return sum(1 for d in self.docs if _matches(d, filter))

    def find(
        self,
        filter: Mapping[str, Any] | None = None,
        sort: Sequence[tuple[str, int]] | None = None,
        limit: int = 0,
    ) -> Iterator[Mapping[str, Any]]:
        self.find_calls.append({"filter": filter, "sort": sort, "limit": limit})
        docs = [d for d in self.docs if _matches(d, filter or {})]
        for field, direction in reversed(list(sort or [])):
            docs.sort(key=lambda d: d.get(field), reverse=direction == -1)
        if limit:
            docs = docs[:limit]
        return self._stream(docs)

    def _stream(self, docs: list[dict[str, Any]]) -> Iterator[Mapping[str, Any]]:
        for doc in docs:
            self.yielded += 1
            yield doc


class FakeStore:
    """Stand-in for :class:`recordcompare.store.client.DocumentStore`."""

    def __init__(
        self,
        options: ConnectionOptions | None = None,
        collections: Mapping[str, FakeCollection] | None = None,
        *,
        reachable: bool = True,
    ) -> None:
        self.options = options or ConnectionOptions(database="records")
        self.collections: dict[str, FakeCollection] = dict(collections or {})
        self.reachable = reachable
        self.closed = False

    def ping(self) -> None:
        if not self.reachable:
            raise ConfigurationError(f"Cannot reach {self.options.connection_string}")

    def get_collection(self, name: str) -> FakeCollection:
        if not self.options.database:
            raise ConfigurationError("No database selected; use 'set --db <name>' first.")
        return self.collections.setdefault(name, FakeCollection(name))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_collection() -> Callable[..., FakeCollection]:
    """Factory for in-memory collections."""
    return FakeCollection


@pytest.fixture
def make_store() -> Callable[..., FakeStore]:
    """Factory for in-memory stores."""
    return FakeStore


@pytest.fixture
def console() -> Console:
    """A rich Console writing to memory (read it back with ``console.file.getvalue()``)."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def make_prompter(console: Console) -> Callable[[str], ConsolePrompter]:
    """Build a prompter whose answers come from ``script`` (one per line)."""

    def _make(script: str) -> ConsolePrompter:
        return ConsolePrompter(console, stream=io.StringIO(script))

    return _make


@pytest.fixture
def snapshots(tmp_path: Path) -> SnapshotDirectory:
    """A freshly reset snapshot directory under ``tmp_path``."""
    directory = SnapshotDirectory(tmp_path / "snapshots")
    directory.reset()
    return directory


def output_of(console: Console) -> str:
    file = console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()


@pytest.fixture
def read_output(console: Console) -> Callable[[], str]:
    """Return everything printed to the captured console so far."""
    return lambda: output_of(console)
