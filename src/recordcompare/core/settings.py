"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files in the working directory: .env, .env.local

Everything the interactive session needs at startup lives here: the default
MongoDB target, the external diff tool, and the snapshot directory. The CLI
flags only override these per process.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    mongo_host / mongo_port / mongo_database
        Default document store target, overridable with `--host`, `--port`
        and `--db` at startup or with the `set` command.
    server_selection_timeout_ms : int
        How long the startup ping waits for a reachable server.
    compare_tool_path : Optional[str]
        Executable invoked with two snapshot paths (e.g. `meld`, `code --diff`
        wrappers, `vimdiff`).
    compare_tool_wait : bool
        Block until the diff tool exits before asking to continue.
    snapshot_dir : Path
        Directory receiving the exported snapshot files.
    preview_limit : int
        Maximum number of documents printed by `find`.
    """

    log_level: LogLevelName = Field(default="WARNING", alias="LOG_LEVEL")

    mongo_host: str = Field(default="localhost", alias="RECORDCOMPARE_HOST")
    mongo_port: int = Field(default=27017, ge=1, le=65535, alias="RECORDCOMPARE_PORT")
    mongo_database: str | None = Field(default=None, alias="RECORDCOMPARE_DB")
    server_selection_timeout_ms: int = Field(
        default=5000, ge=1, alias="RECORDCOMPARE_SERVER_TIMEOUT_MS"
    )

    compare_tool_path: str | None = Field(default=None, alias="RECORDCOMPARE_DIFF_TOOL")
    compare_tool_wait: bool = Field(default=False, alias="RECORDCOMPARE_DIFF_WAIT")

    snapshot_dir: Path = Field(default=Path("temp"), alias="RECORDCOMPARE_SNAPSHOT_DIR")
    preview_limit: int = Field(default=10, ge=1, alias="RECORDCOMPARE_PREVIEW_LIMIT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.WARNING)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "recordcompare") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
