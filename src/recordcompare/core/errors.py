"""
Error taxonomy for the record comparison tool.

The REPL reports every :class:`RecordCompareError` as a single console line
and goes back to the prompt; only a :class:`ConfigurationError` raised during
startup ends the process.
"""

from __future__ import annotations


class RecordCompareError(Exception):
    """Base exception for operator-visible failures."""


class ConfigurationError(RecordCompareError):
    """The document store target is unreachable or incomplete."""


class OperatorInputError(RecordCompareError):
    """A command's arguments could not be understood."""


class QueryParseError(OperatorInputError):
    """Filter or sort text is not a JSON object in the expected shape."""


class SnapshotWriteError(RecordCompareError):
    """Failed to write a snapshot file to disk."""


class DiffToolError(RecordCompareError):
    """The external diff tool is not configured or could not be started."""


__all__ = [
    "RecordCompareError",
    "ConfigurationError",
    "OperatorInputError",
    "QueryParseError",
    "SnapshotWriteError",
    "DiffToolError",
]
