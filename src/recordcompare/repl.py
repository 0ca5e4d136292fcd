"""
Interactive command loop.

Verbs
-----
    set <args>                        reconfigure the target (--host/-h, --port/-p, --db/-d)
    find <collection> [<jsonFilter>]  select a collection and/or filter, count, preview
    sort [<jsonSortSpec>]             replace the sort specification
    compare                           diff consecutive matching records
    exit                              leave the loop

Each input line is split once into a verb and a remainder; the remainder is
handed to the verb's handler untouched. Unknown verbs never fail: they
reprint the connection and session state so the operator can re-orient.
Errors raised by a handler are reported and the loop carries on.
"""

from __future__ import annotations

from collections.abc import Callable

from bson import json_util
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.json import JSON
from rich.markup import escape

from recordcompare.compare.difftool import DiffLauncher
from recordcompare.compare.driver import CompareReport, compare, print_state
from recordcompare.console import ConsolePrompter
from recordcompare.core.errors import RecordCompareError
from recordcompare.core.session import SessionState
from recordcompare.core.settings import get_logger, load_settings
from recordcompare.core.snapshots import SnapshotDirectory
from recordcompare.store.client import ConnectionOptions, DocumentStore, parse_connection_args
from recordcompare.store.query import parse_filter, parse_sort

EXIT_VERB = "exit"
DISPLAY_PROMPT = "Display results?"

Handler = Callable[[str], None]
StoreFactory = Callable[[ConnectionOptions], DocumentStore]

logger = get_logger("recordcompare.repl")


def split_command(line: str) -> tuple[str, str]:
    """Split ``line`` into ``(verb, remainder)`` at the first space."""
    verb, _, remainder = line.strip().partition(" ")
    return verb, remainder.strip()


class CommandDispatcher:
    """Read-evaluate loop routing verbs to handlers over one :class:`SessionState`."""

    def __init__(
        self,
        state: SessionState,
        store: DocumentStore,
        *,
        snapshots: SnapshotDirectory,
        launcher: DiffLauncher,
        prompter: ConsolePrompter,
        console: Console,
        store_factory: StoreFactory = DocumentStore,
        preview_limit: int | None = None,
    ) -> None:
        self.state = state
        self.store = store
        self.snapshots = snapshots
        self.launcher = launcher
        self.prompter = prompter
        self.console = console
        self.store_factory = store_factory
        self.preview_limit = (
            preview_limit if preview_limit is not None else load_settings().preview_limit
        )
        self.last_report: CompareReport | None = None

        self.handlers: dict[str, Handler] = {
            "set": self.do_set,
            "find": self.do_find,
            "sort": self.do_sort,
            "compare": self.do_compare,
        }

    # ------------------------------- Loop -----------------------------------

    def run(self) -> None:
        """Prompt until ``exit`` or end of input."""
        while True:
            try:
                line = self.prompter.read_line("> ")
            except EOFError:
                self.console.print("Exiting...")
                return
            if not self.dispatch(line):
                return

    def dispatch(self, line: str) -> bool:
        """Run one command line; return False when the loop should stop."""
        verb, remainder = split_command(line)

        if verb == EXIT_VERB:
            self.console.print("Exiting...")
            return False

        handler = self.handlers.get(verb)
        if handler is None:
            self.print_server()
            self.print_state()
            return True

        try:
            handler(remainder)
        except (RecordCompareError, PyMongoError) as e:
            logger.warning("Command '%s' failed: %s", verb, e)
            self.console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return True

    # ------------------------------- Output ---------------------------------

    def print_server(self) -> None:
        options = self.store.options
        self.console.print(f"Server: {options.connection_string}", markup=False, highlight=False)
        self.console.print(f"Database: {options.database or ''}", markup=False, highlight=False)

    def print_state(self) -> None:
        print_state(self.console, self.state)

    # ------------------------------- Handlers -------------------------------

    def do_set(self, remainder: str) -> None:
        """Reconnect to a new target; on failure the current connection stays."""
        options = parse_connection_args(remainder, self.store.options)
        if options != self.store.options:
            new_store = self.store_factory(options)
            try:
                new_store.ping()
            except RecordCompareError:
                new_store.close()
                raise

            old_store, self.store = self.store, new_store
            old_store.close()
            logger.info("Switched target to %s / %s", options.connection_string, options.database)

            # Keep the active collection by name on the new connection.
            name = self.state.collection_name
            if name is not None:
                if options.database:
                    self.state.select(new_store.get_collection(name))
                else:
                    self.state.deselect()

        self.print_server()
        self.print_state()

    def do_find(self, remainder: str) -> None:
        """Select a collection, optionally replace the filter, count and preview."""
        name, _, filter_text = remainder.partition(" ")
        if name:
            # Parse before touching the state so a bad filter changes nothing.
            query = parse_filter(filter_text) if filter_text.strip() else None
            self.state.select(self.store.get_collection(name))
            if query is not None:
                self.state.set_filter(query)

        self.print_state()

        collection = self.state.collection
        if collection is None:
            return

        query = self.state.effective_filter()
        total = collection.count_documents(query)
        self.console.print(f"Total results: {total}")

        if total > 0 and self.prompter.confirm(DISPLAY_PROMPT):
            cursor = collection.find(
                query, sort=self.state.effective_sort(), limit=self.preview_limit
            )
            for doc in cursor:
                self.console.print(
                    JSON(json_util.dumps(doc, json_options=json_util.RELAXED_JSON_OPTIONS))
                )

    def do_sort(self, remainder: str) -> None:
        """Replace the sort specification; an empty remainder only reports it."""
        if remainder:
            self.state.set_sort(parse_sort(remainder))
        self.print_state()

    def do_compare(self, remainder: str) -> None:
        self.last_report = compare(
            self.state,
            snapshots=self.snapshots,
            launcher=self.launcher,
            prompter=self.prompter,
            console=self.console,
        )


__all__ = ["CommandDispatcher", "split_command", "EXIT_VERB"]
