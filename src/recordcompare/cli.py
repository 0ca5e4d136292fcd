# src/recordcompare/cli.py
"""
RecordCompare Command Line Interface (CLI).

This module is the process entry point. It uses `typer` for the startup
flags and `rich` for console output, then hands control to the interactive
:class:`~recordcompare.repl.CommandDispatcher`.

Startup
-------
1. Load `.env` so settings and the diff tool path are available.
2. Clear the snapshot directory (once per process).
3. Connect to MongoDB and ping it; an unreachable target is fatal.
4. Print the target and enter the `> ` prompt.

Usage
-----
    $ recordcompare --host db01 --db Sales --diff-tool meld
    > find Orders {"EntityId": 42}
    > sort {"Adt.UT": 1}
    > compare
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from recordcompare.compare.difftool import DiffLauncher
from recordcompare.console import ConsolePrompter
from recordcompare.core.errors import ConfigurationError
from recordcompare.core.session import SessionState
from recordcompare.core.settings import get_logger, load_settings
from recordcompare.core.snapshots import SnapshotDirectory
from recordcompare.repl import CommandDispatcher
from recordcompare.store.client import ConnectionOptions, DocumentStore

# Ensure env vars (like RECORDCOMPARE_DIFF_TOOL) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="RecordCompare: diff successive versions of MongoDB records.",
    rich_markup_mode="markdown",
    add_completion=False,
)
console = Console()
logger = get_logger("recordcompare.cli")


# Fixed (MyPy): Untyped decorator workaround
@app.command()  # type: ignore[misc]
def main(
    host: Annotated[
        str | None,
        typer.Option("--host", "-h", help="MongoDB host (default: localhost)."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="MongoDB port (default: 27017)."),
    ] = None,
    db: Annotated[
        str | None,
        typer.Option("--db", "-d", help="Database holding the versioned collections."),
    ] = None,
    snapshot_dir: Annotated[
        Path | None,
        typer.Option("--snapshot-dir", help="Where snapshot files are written."),
    ] = None,
    diff_tool: Annotated[
        str | None,
        typer.Option("--diff-tool", help="Executable invoked with two snapshot paths."),
    ] = None,
    wait: Annotated[
        bool | None,
        typer.Option("--wait/--no-wait", help="Block until the diff tool exits."),
    ] = None,
) -> None:
    """
    Start an interactive comparison session.

    Verbs: `set <args>`, `find <collection> [<jsonFilter>]`,
    `sort [<jsonSortSpec>]`, `compare`, `exit`.
    """
    s = load_settings()

    defaults = ConnectionOptions.from_settings()
    try:
        options = ConnectionOptions(
            host=host or defaults.host,
            port=port if port is not None else defaults.port,
            database=db or defaults.database,
        )
    except ValidationError as e:
        console.print(f"[bold red]❌ Connection Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    snapshots = SnapshotDirectory(snapshot_dir or s.snapshot_dir)
    launcher = DiffLauncher(
        diff_tool or s.compare_tool_path,
        wait=s.compare_tool_wait if wait is None else wait,
    )

    try:
        removed = snapshots.reset()
    except OSError as e:
        console.print(f"[bold red]❌ Snapshot directory error:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    logger.debug("Removed %d stale snapshot(s)", removed)

    try:
        store = DocumentStore(options)
    except PyMongoError as e:
        # MongoClient parses the connection string eagerly.
        console.print(f"[bold red]❌ Connection Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    try:
        store.ping()
    except ConfigurationError as e:
        store.close()
        console.print(f"[bold red]❌ Connection Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    console.print(
        Panel.fit(
            f"[bold cyan]RecordCompare[/bold cyan]\nSnapshots: [u]{snapshots.base_dir}[/u]",
            border_style="cyan",
        )
    )

    dispatcher = CommandDispatcher(
        SessionState(),
        store,
        snapshots=snapshots,
        launcher=launcher,
        prompter=ConsolePrompter(console),
        console=console,
        preview_limit=s.preview_limit,
    )
    dispatcher.print_server()
    try:
        dispatcher.run()
    finally:
        dispatcher.store.close()


if __name__ == "__main__":
    app()
