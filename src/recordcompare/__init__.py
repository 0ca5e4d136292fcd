"""RecordCompare package bootstrap.

Interactive tool for diffing successive versions of records stored in
MongoDB: records are exported as canonical JSON snapshots and opened pairwise
in an external diff viewer.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
