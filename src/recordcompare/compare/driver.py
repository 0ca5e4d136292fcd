"""
Comparison driver: pairwise export and diff of consecutive records.

Flow Overview
-------------
1. Report the session state and count the documents matching the filter.
2. With fewer than two matches there is nothing to pair: report and stop.
3. Otherwise stream the matching documents in sort order. Each one is
   canonicalized, named and written to a fresh snapshot file.
4. From the second document on, the previous and current snapshot files are
   handed to the external diff tool and the operator is asked whether to go
   on. A "no" stops the run before the next document is even read.

Design Principles
-----------------
- **Streaming**: the store cursor is consumed one document at a time through
  :func:`iter_snapshot_pairs`, a lazy generator, so large result sets are
  never materialized and declined runs export nothing further.
- **Sequential**: at most N-1 launches for N documents, one at a time; the
  next launch only happens after the operator confirms.
- **One token per run**: every file of a run shares a single disambiguator.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from rich.console import Console

from recordcompare.compare.difftool import DiffLauncher
from recordcompare.console import ConsolePrompter
from recordcompare.core.canonical import canonical_text
from recordcompare.core.naming import new_disambiguator, snapshot_name
from recordcompare.core.session import SessionState
from recordcompare.core.settings import get_logger
from recordcompare.core.snapshots import SnapshotDirectory

CompareStatus = Literal["no_collection", "not_enough_results", "completed", "declined"]

NEXT_SET_PROMPT = "Go to next set?"

logger = get_logger("recordcompare.driver")


@dataclass(frozen=True, slots=True)
class SnapshotPair:
    """Two consecutive snapshot files of one comparison run."""

    previous: Path
    current: Path


@dataclass(slots=True)
class CompareReport:
    """What a `compare` run did.

    Attributes
    ----------
    status : CompareStatus
        Why the run ended.
    total : int
        Number of matching documents reported by the store (0 when no
        collection is active).
    disambiguator : str | None
        The run's filename token; None when nothing was exported.
    files : list[Path]
        Snapshot files written, in export order.
    launches : int
        Number of diff tool invocations.
    """

    status: CompareStatus
    total: int = 0
    disambiguator: str | None = None
    files: list[Path] = field(default_factory=list)
    launches: int = 0


def iter_snapshot_pairs(
    collection_name: str,
    documents: Iterable[Mapping[str, Any]],
    snapshots: SnapshotDirectory,
    disambiguator: str,
) -> Iterator[SnapshotPair]:
    """Export ``documents`` one by one and yield each consecutive pair of files.

    A document is only read from ``documents`` (and written to disk) when the
    consumer asks for the next pair, so closing the generator early leaves the
    rest of the cursor untouched.
    """
    previous: Path | None = None
    for doc in documents:
        name = snapshot_name(collection_name, doc, disambiguator)
        current = snapshots.write(name, canonical_text(doc))
        if previous is not None:
            yield SnapshotPair(previous=previous, current=current)
        previous = current


def print_state(console: Console, state: SessionState) -> None:
    for line in state.describe():
        console.print(line, markup=False, highlight=False)
    console.print("")


def compare(
    state: SessionState,
    *,
    snapshots: SnapshotDirectory,
    launcher: DiffLauncher,
    prompter: ConsolePrompter,
    console: Console,
) -> CompareReport:
    """Run the export / diff / confirm loop over the session's result set."""
    print_state(console, state)

    collection = state.collection
    if collection is None:
        console.print("No collection selected; use 'find <collection>' first.")
        return CompareReport(status="no_collection")

    query = state.effective_filter()
    total = collection.count_documents(query)
    console.print(f"Total results: {total}")

    if total < 2:
        console.print("Not enough results to compare.")
        return CompareReport(status="not_enough_results", total=total)

    token = new_disambiguator()
    report = CompareReport(status="completed", total=total, disambiguator=token)
    cursor = collection.find(query, sort=state.effective_sort())
    first_file = len(snapshots.written)
    logger.info(
        "Comparing %d record(s) of %s with token %s", total, collection.name, token
    )

    pairs = iter_snapshot_pairs(collection.name, cursor, snapshots, token)
    try:
        for pair in pairs:
            console.print("Comparing records...")
            launcher.launch(pair.previous, pair.current)
            report.launches += 1

            if not prompter.confirm(NEXT_SET_PROMPT):
                report.status = "declined"
                break
    finally:
        pairs.close()
        # pymongo cursors hold a server-side cursor open until exhausted or closed.
        close_cursor = getattr(cursor, "close", None)
        if close_cursor is not None:
            close_cursor()
        report.files = list(snapshots.written[first_file:])

    logger.info(
        "Compare run %s ended (%s): %d file(s), %d launch(es)",
        token,
        report.status,
        len(report.files),
        report.launches,
    )
    return report


__all__ = [
    "CompareReport",
    "CompareStatus",
    "SnapshotPair",
    "compare",
    "iter_snapshot_pairs",
    "print_state",
]
