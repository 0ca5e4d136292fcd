"""External diff tool launcher.

The tool is any executable accepting two file paths (``meld``, ``kdiff3``,
``vimdiff``, a ``code --diff`` wrapper, ...). Its exit code and output are
never inspected: the operator looks at the diff and then answers the
"Go to next set?" prompt.

GUI viewers are started and left running (``wait=False``). Terminal tools
need the console, so ``wait=True`` blocks until they exit.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from recordcompare.core.errors import DiffToolError
from recordcompare.core.settings import get_logger

logger = get_logger("recordcompare.difftool")


@dataclass(frozen=True, slots=True)
class LaunchResult:
    """Outcome of one diff tool invocation."""

    args: tuple[str, ...]
    pid: int
    waited: bool


class DiffLauncher:
    """Spawn the configured diff tool on a pair of snapshot files."""

    def __init__(self, tool_path: str | None, *, wait: bool = False) -> None:
        self.tool_path = tool_path
        self.wait = wait

    def launch(self, left: Path, right: Path) -> LaunchResult:
        """Start the tool with ``left`` and ``right``; raise :class:`DiffToolError` on failure."""
        if not self.tool_path:
            raise DiffToolError(
                "No diff tool configured; set RECORDCOMPARE_DIFF_TOOL or pass --diff-tool."
            )

        args = (self.tool_path, str(left), str(right))
        logger.info("Launching diff: %s", " ".join(args))
        try:
            process = subprocess.Popen(args)
            if self.wait:
                process.wait()
        except OSError as e:
            raise DiffToolError(f"Cannot start diff tool '{self.tool_path}': {e}") from e

        return LaunchResult(args=args, pid=process.pid, waited=self.wait)


__all__ = ["DiffLauncher", "LaunchResult"]
