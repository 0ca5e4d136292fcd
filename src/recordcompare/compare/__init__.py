"""Comparison engine entry points.

- :func:`compare` — export / diff / confirm loop over the session's results.
- :class:`DiffLauncher` — spawns the external diff tool.
"""

from __future__ import annotations

from .difftool import DiffLauncher, LaunchResult
from .driver import CompareReport, SnapshotPair, compare, iter_snapshot_pairs

__all__ = [
    "compare",
    "iter_snapshot_pairs",
    "CompareReport",
    "SnapshotPair",
    "DiffLauncher",
    "LaunchResult",
]
