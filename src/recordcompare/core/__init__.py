"""Core package initializer for RecordCompare.

Holds the pieces with no I/O beyond the snapshot directory:
    canonical serialization, snapshot naming, session state, settings, errors.
"""

from __future__ import annotations

__all__ = ["__doc__"]
