"""
Operator console: the two blocking read points of the tool.

- ``read_line(prompt)``: the REPL prompt (``> ``).
- ``confirm(message)``: the ``[y/n]`` questions ("Display results?",
  "Go to next set?"). Anything that is not a yes, including end of input,
  counts as no.

Both read from the terminal through :mod:`rich`, or from ``stream`` when one
is given (tests and piped sessions).
"""

from __future__ import annotations

from typing import TextIO

from rich.console import Console
from rich.prompt import Confirm


class ConsolePrompter:
    """Line-based operator input on top of a rich :class:`Console`."""

    def __init__(self, console: Console, stream: TextIO | None = None) -> None:
        self.console = console
        self.stream = stream

    def read_line(self, prompt: str = "> ") -> str:
        """Read one line; raise :class:`EOFError` when input is exhausted."""
        if self.stream is None:
            return self.console.input(prompt, markup=False)
        line = self.console.input(prompt, markup=False, stream=self.stream)
        if line == "":
            raise EOFError
        return line.rstrip("\r\n")

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; defaults to no."""
        try:
            return Confirm.ask(message, default=False, console=self.console, stream=self.stream)
        except EOFError:
            # Closed stdin at a question; the next `read_line` ends the session.
            return False


__all__ = ["ConsolePrompter"]
