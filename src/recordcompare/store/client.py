"""
MongoDB connection handling.

This module owns the connection target and the client built from it:

- :class:`ConnectionOptions`: host / port / database, validated with Pydantic.
- :class:`DocumentStore`: a ``pymongo`` client reading from secondaries when
  available, with a ``ping()`` used to reject bad targets up front.
- :func:`parse_connection_args`: turns the remainder of a ``set`` command
  (``--host db2 --db Sales``) into updated options.

The connection string always has the ``mongodb://<host>:<port>`` shape; more
elaborate URIs are out of scope for an inspection tool.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from typing import Any

import click
from pydantic import BaseModel, Field, ValidationError
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from recordcompare.core.errors import ConfigurationError, OperatorInputError
from recordcompare.core.settings import get_logger, load_settings
from recordcompare.store.collection import RecordCollection

DEFAULT_SCHEME = "mongodb://"

logger = get_logger("recordcompare.store")


class ConnectionOptions(BaseModel):
    """Document store target."""

    host: str = Field(default="localhost", min_length=1)
    port: int = Field(default=27017, ge=1, le=65535)
    database: str | None = Field(default=None, description="Database holding the collections")

    @property
    def connection_string(self) -> str:
        return f"{DEFAULT_SCHEME}{self.host}:{self.port}"

    @classmethod
    def from_settings(cls) -> ConnectionOptions:
        s = load_settings()
        return cls(host=s.mongo_host, port=s.mongo_port, database=s.mongo_database)


class DocumentStore:
    """Thin wrapper over :class:`pymongo.MongoClient` bound to one database."""

    def __init__(
        self,
        options: ConnectionOptions,
        *,
        server_selection_timeout_ms: int | None = None,
        client_factory: Callable[..., Any] = MongoClient,
    ) -> None:
        timeout = (
            server_selection_timeout_ms
            if server_selection_timeout_ms is not None
            else load_settings().server_selection_timeout_ms
        )
        self.options = options
        self._client = client_factory(
            options.connection_string,
            readPreference="secondaryPreferred",
            serverSelectionTimeoutMS=timeout,
        )

    def ping(self) -> None:
        """Round-trip to the server; raise :class:`ConfigurationError` if unreachable."""
        try:
            self._client.admin.command("ping")
        except PyMongoError as e:
            raise ConfigurationError(
                f"Cannot reach {self.options.connection_string}: {e}"
            ) from e
        logger.info("Connected to %s", self.options.connection_string)

    def get_collection(self, name: str) -> RecordCollection:
        """Return collection ``name`` of the configured database."""
        if not self.options.database:
            raise ConfigurationError("No database selected; use 'set --db <name>' first.")
        collection: RecordCollection = self._client[self.options.database][name]
        return collection

    def close(self) -> None:
        self._client.close()


# --------------------------------------------------------------------------- #
# `set` argument parsing
# --------------------------------------------------------------------------- #


@click.command(name="set")
@click.option("--host", "-h", type=str, default=None, help="Server host name.")
@click.option("--port", "-p", type=int, default=None, help="Server port.")
@click.option("--db", "-d", type=str, default=None, help="Database name.")
def _set_options(host: str | None, port: int | None, db: str | None) -> dict[str, Any]:
    """Reconfigure the document store target."""
    changes: dict[str, Any] = {"host": host, "port": port, "database": db}
    return {key: value for key, value in changes.items() if value is not None}


def parse_connection_args(remainder: str, current: ConnectionOptions) -> ConnectionOptions:
    """Apply ``--host/-h``, ``--port/-p`` and ``--db/-d`` flags on top of ``current``.

    Flags that are not given keep their current value. Unknown flags or bad
    values raise :class:`OperatorInputError`.
    """
    try:
        args = shlex.split(remainder)
    except ValueError as e:
        raise OperatorInputError(f"Cannot parse arguments: {e}") from e

    try:
        changes = _set_options.main(args=args, prog_name="set", standalone_mode=False)
    except click.ClickException as e:
        raise OperatorInputError(e.format_message()) from e

    # `--help` returns an exit code instead of the collected options.
    if not isinstance(changes, dict):
        return current
    try:
        return ConnectionOptions.model_validate({**current.model_dump(), **changes})
    except ValidationError as e:
        raise OperatorInputError(f"Invalid connection options: {e}") from e


__all__ = ["ConnectionOptions", "DocumentStore", "parse_connection_args"]
