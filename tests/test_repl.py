"""
Tests for the command dispatcher.

Operator input is scripted through the prompter stream: each line is either a
command for the `> ` prompt or an answer to a `[y/n]` question, in the order
the loop asks for them.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from recordcompare.compare.difftool import DiffLauncher
from recordcompare.core.session import SessionState
from recordcompare.core.snapshots import SnapshotDirectory
from recordcompare.repl import CommandDispatcher, split_command
from recordcompare.store.client import ConnectionOptions


@pytest.fixture
def build(
    make_store: Callable[..., Any],
    make_prompter: Callable[[str], Any],
    snapshots: SnapshotDirectory,
    console: Console,
) -> Callable[..., CommandDispatcher]:
    """Build a dispatcher over a fake store with a scripted input stream."""

    def _build(script: str = "", store: Any = None, **kwargs: Any) -> CommandDispatcher:
        return CommandDispatcher(
            SessionState(),
            store if store is not None else make_store(),
            snapshots=snapshots,
            launcher=MagicMock(spec=DiffLauncher),
            prompter=make_prompter(script),
            console=console,
            **kwargs,
        )

    return _build


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("compare", ("compare", "")),
        ("  find orders  ", ("find", "orders")),
        ('find orders {"a": 1, "b": 2}', ("find", 'orders {"a": 1, "b": 2}')),
        ("", ("", "")),
    ],
)
def test_split_command(line: str, expected: tuple[str, str]) -> None:
    assert split_command(line) == expected


def test_unknown_verb_reprints_state_and_continues(
    build: Callable[..., CommandDispatcher], read_output: Callable[[], str]
) -> None:
    dispatcher = build()
    assert dispatcher.dispatch("foo") is True
    out = read_output()
    assert "Server: mongodb://localhost:27017" in out
    assert "Database: records" in out
    assert "Collection: " in out and "Query: " in out and "Sort: " in out


def test_exit_stops_the_loop(
    build: Callable[..., CommandDispatcher], read_output: Callable[[], str]
) -> None:
    dispatcher = build("foo\nexit\nfind never_reached\n")
    dispatcher.run()
    out = read_output()
    assert "Exiting..." in out
    assert dispatcher.state.collection is None


def test_end_of_input_stops_the_loop(
    build: Callable[..., CommandDispatcher], read_output: Callable[[], str]
) -> None:
    build("").run()
    assert "Exiting..." in read_output()


def test_find_selects_collection_counts_and_previews(
    build: Callable[..., CommandDispatcher],
    make_store: Callable[..., Any],
    make_collection: Callable[..., Any],
    read_output: Callable[[], str],
) -> None:
    docs = [{"_id": i, "EntityId": 7 if i < 4 else 8} for i in range(1, 6)]
    store = make_store(collections={"orders": make_collection("orders", docs)})
    dispatcher = build('find orders {"EntityId": 7}\ny\nexit\n', store=store, preview_limit=2)

    dispatcher.run()

    out = read_output()
    assert dispatcher.state.collection_name == "orders"
    assert dispatcher.state.filter == {"EntityId": 7}
    assert "Total results: 3" in out
    assert store.collections["orders"].find_calls == [
        {"filter": {"EntityId": 7}, "sort": None, "limit": 2}
    ]
    assert '"_id": 1' in out and '"_id": 2' in out and '"_id": 3' not in out


def test_find_without_filter_keeps_the_active_filter(
    build: Callable[..., CommandDispatcher],
) -> None:
    dispatcher = build("n\nn\n")
    dispatcher.dispatch('find orders {"Status": "open"}')
    dispatcher.dispatch("find invoices")
    assert dispatcher.state.collection_name == "invoices"
    assert dispatcher.state.filter == {"Status": "open"}


def test_bad_filter_is_reported_and_changes_nothing(
    build: Callable[..., CommandDispatcher], read_output: Callable[[], str]
) -> None:
    dispatcher = build()
    assert dispatcher.dispatch("find orders {not json") is True
    assert dispatcher.state.collection is None
    assert "Error:" in read_output()
    assert "Invalid filter JSON" in read_output()


def test_sort_replaces_specification(
    build: Callable[..., CommandDispatcher], read_output: Callable[[], str]
) -> None:
    dispatcher = build()
    dispatcher.dispatch('sort {"Adt.UT": 1}')
    dispatcher.dispatch('sort {"_id": -1}')
    assert dispatcher.state.sort == [("_id", -1)]
    assert 'Sort: {"_id": -1}' in read_output()

    dispatcher.dispatch("sort")
    assert dispatcher.state.sort == [("_id", -1)]

    dispatcher.dispatch("sort {}")
    assert dispatcher.state.sort is None


def test_set_switches_store_and_rebinds_collection(
    build: Callable[..., CommandDispatcher],
    make_store: Callable[..., Any],
    read_output: Callable[[], str],
) -> None:
    old_store = make_store()
    created: list[Any] = []

    def factory(options: ConnectionOptions) -> Any:
        store = make_store(options)
        created.append(store)
        return store

    dispatcher = build("n\n", store=old_store, store_factory=factory)
    dispatcher.dispatch("find orders")
    dispatcher.dispatch("set --host db02 --db Archive")

    assert len(created) == 1
    assert dispatcher.store is created[0]
    assert old_store.closed is True
    assert dispatcher.state.collection is created[0].collections["orders"]
    out = read_output()
    assert "Server: mongodb://db02:27017" in out
    assert "Database: Archive" in out


def test_set_to_unreachable_target_keeps_current_store(
    build: Callable[..., CommandDispatcher],
    make_store: Callable[..., Any],
    read_output: Callable[[], str],
) -> None:
    old_store = make_store()
    dispatcher = build(
        store=old_store,
        store_factory=lambda options: make_store(options, reachable=False),
    )

    assert dispatcher.dispatch("set -h nowhere") is True
    assert dispatcher.store is old_store
    assert old_store.closed is False
    assert "Cannot reach mongodb://nowhere:27017" in read_output()


def test_set_with_bad_flags_is_reported(
    build: Callable[..., CommandDispatcher], read_output: Callable[[], str]
) -> None:
    dispatcher = build()
    assert dispatcher.dispatch("set --colour blue") is True
    assert "Error:" in read_output()


def test_compare_runs_the_driver(
    build: Callable[..., CommandDispatcher],
    make_store: Callable[..., Any],
    make_collection: Callable[..., Any],
    read_output: Callable[[], str],
) -> None:
    docs = [{"_id": 1, "a": 1}, {"_id": 2, "a": 2}, {"_id": 3, "a": 3}]
    store = make_store(collections={"orders": make_collection("orders", docs)})
    dispatcher = build("find orders\nn\ncompare\nn\nexit\n", store=store)

    dispatcher.run()

    report = dispatcher.last_report
    assert report is not None
    assert report.status == "declined"
    assert report.launches == 1
    assert "Total results: 3" in read_output()


def test_compare_without_collection(
    build: Callable[..., CommandDispatcher], read_output: Callable[[], str]
) -> None:
    dispatcher = build()
    dispatcher.dispatch("compare")
    assert dispatcher.last_report is not None
    assert dispatcher.last_report.status == "no_collection"
    assert "No collection selected" in read_output()


def test_find_without_database_is_reported(
    build: Callable[..., CommandDispatcher],
    make_store: Callable[..., Any],
    read_output: Callable[[], str],
) -> None:
    dispatcher = build(store=make_store(ConnectionOptions()))
    assert dispatcher.dispatch("find orders") is True
    assert "set --db" in read_output()
