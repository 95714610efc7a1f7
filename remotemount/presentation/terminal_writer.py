"""
Terminal writers used by the status view.

The view only ever needs two instructions: move the cursor up or down by a
number of rows relative to where it is, and write one full line. The
absolute screen position of the view is unknown, so nothing here addresses
absolute coordinates.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, Union

from rich.console import Console
from rich.control import Control
from rich.text import Text


class TerminalWriter(ABC):
    @abstractmethod
    def move_cursor(self, rows: int) -> None:
        """Move the cursor `rows` lines down (positive) or up (negative)."""

    @abstractmethod
    def write_line(self, line: Text) -> None:
        """Write one line followed by a newline."""


class ConsoleTerminalWriter(TerminalWriter):
    """Writes to a rich Console, normally stdout."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    @property
    def width(self) -> int:
        return self.console.width

    def move_cursor(self, rows: int) -> None:
        if rows:
            self.console.control(Control.move(0, rows))

    def write_line(self, line: Text) -> None:
        self.console.print(line, soft_wrap=True, highlight=False)


Instruction = Tuple[str, Union[int, str]]


class CapturingTerminalWriter(TerminalWriter):
    """Records instructions instead of touching a terminal."""

    def __init__(self) -> None:
        self.instructions: List[Instruction] = []

    def move_cursor(self, rows: int) -> None:
        if rows:
            self.instructions.append(("move", rows))

    def write_line(self, line: Text) -> None:
        self.instructions.append(("line", line.plain))

    @property
    def moves(self) -> List[int]:
        return [value for kind, value in self.instructions if kind == "move"]

    @property
    def lines(self) -> List[str]:
        return [value for kind, value in self.instructions if kind == "line"]

    def screen(self, rows: int) -> List[str]:
        """Replay the instructions onto a blank view of `rows` lines."""
        view = [""] * rows
        cursor = 0
        for kind, value in self.instructions:
            if kind == "move":
                cursor += value
            else:
                if 0 <= cursor < rows:
                    view[cursor] = value
                cursor += 1
        return view
