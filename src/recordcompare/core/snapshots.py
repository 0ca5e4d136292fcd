"""Disk-backed snapshot directory.

- Default directory: ``settings.snapshot_dir`` (``RECORDCOMPARE_SNAPSHOT_DIR``)
- Filename pattern:  ``<snapshot name>.json`` (see :mod:`recordcompare.core.naming`)
- Content:           canonical Extended JSON text, UTF-8

The directory is cleared once, when the process starts. During a session files
are only ever added: the diff tool may still have them open after it returns
control, so nothing is reclaimed until the next start.
"""

from __future__ import annotations

from pathlib import Path

from recordcompare.core.errors import SnapshotWriteError
from recordcompare.core.settings import get_logger, load_settings

SNAPSHOT_SUFFIX = ".json"

logger = get_logger("recordcompare.snapshots")


class SnapshotDirectory:
    """Write-once snapshot files under a single base directory."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir: Path = base_dir if base_dir is not None else load_settings().snapshot_dir
        self._written: list[Path] = []

    def reset(self) -> int:
        """Create the directory and delete the files left by earlier sessions.

        Deletion is best-effort: a file that cannot be removed (e.g. still
        locked by a diff viewer) is logged and skipped. Returns the number of
        files removed.
        """
        self.base_dir.mkdir(parents=True, exist_ok=True)
        removed = 0
        for path in self.base_dir.iterdir():
            if not path.is_file():
                continue
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning("Could not delete old snapshot %s: %s", path, e)
        logger.debug("Cleared %d snapshot file(s) from %s", removed, self.base_dir)
        return removed

    def path_for(self, name: str) -> Path:
        """Return a path for ``name`` that does not exist yet.

        Records without id and timestamp share a name within one run; those
        get a ``-2``, ``-3``, ... suffix instead of overwriting each other.
        """
        path = self.base_dir / f"{name}{SNAPSHOT_SUFFIX}"
        counter = 2
        while path.exists():
            path = self.base_dir / f"{name}-{counter}{SNAPSHOT_SUFFIX}"
            counter += 1
        return path

    def write(self, name: str, text: str) -> Path:
        """Write ``text`` to a new ``<name>.json`` file and return its path."""
        path = self.path_for(name)
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise SnapshotWriteError(f"Cannot write snapshot {path}: {e}") from e
        self._written.append(path)
        logger.debug("Wrote snapshot %s", path)
        return path

    @property
    def written(self) -> tuple[Path, ...]:
        """Files written during this session, in order."""
        return tuple(self._written)


__all__ = ["SnapshotDirectory", "SNAPSHOT_SUFFIX"]
