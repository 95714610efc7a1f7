"""
Status view - one line per target, rewritten in place as results arrive.

The view is painted once top to bottom while targets are dispatched. After
that every update moves a virtual cursor to the row it belongs to, using
relative movement only, and rewrites just that line.
"""

import logging

from rich.cells import cell_len
from rich.text import Text

from remotemount.core.exceptions import RenderOrderError
from remotemount.models import MountStatus, Target

from .terminal_writer import TerminalWriter

STATUS_STYLES = {
    MountStatus.UNKNOWN: "",
    MountStatus.PENDING: "",
    MountStatus.WARNED: "yellow",
    MountStatus.FAILED: "red",
    MountStatus.OKAY: "green",
}

# Room kept for the separator and a spare column after the name
LINE_OVERHEAD = 3


def shorten(text: str, width: int) -> str:
    """First line of `text`, cut to at most `width` terminal cells."""
    newline = text.find("\n")
    if newline >= 0:
        text = text[:newline]
    width = max(width, 0)
    while cell_len(text) > width:
        text = text[:-1]
    return text


class CursorTracker:
    """
    The view's belief about which row the real cursor is on.

    Starts at `max_row`, just below the last line of a fully painted view.
    """

    def __init__(self, writer: TerminalWriter, max_row: int):
        self._writer = writer
        self.max_row = max_row
        self.row = max_row

    def go_to(self, y: int) -> None:
        if y < self.row:
            self._writer.move_cursor(-(self.row - y))
        elif y > self.row:
            self._writer.move_cursor(y - self.row)
        self.row = y

    def max_out(self) -> None:
        self.go_to(self.max_row)

    def was_bumped(self) -> None:
        """A newline was written; the real cursor fell one row."""
        self.row += 1


class StatusRenderer:
    def __init__(self, writer: TerminalWriter, total_rows: int, line_width: int = 80):
        self._writer = writer
        self._total_rows = total_rows
        self._line_width = line_width
        self._painted = 0
        self._cursor = CursorTracker(writer, total_rows)

    @property
    def cursor(self) -> CursorTracker:
        return self._cursor

    @property
    def painted(self) -> int:
        return self._painted

    def format_line(self, target: Target) -> Text:
        # Name plus the longest fixed suffix (": ...") stays within one line
        local_name = shorten(target.local_name, self._line_width - LINE_OVERHEAD - 3)
        name = Text(local_name, style=STATUS_STYLES[target.status])
        room = self._line_width - LINE_OVERHEAD - cell_len(local_name)
        reason = target.reason or ""

        if target.status == MountStatus.UNKNOWN:
            return Text.assemble(name, ": ???")
        if target.status == MountStatus.PENDING:
            return Text.assemble(name, ": ...")
        if target.status == MountStatus.WARNED:
            return Text.assemble(name, " ", shorten(reason, room))
        if target.status == MountStatus.FAILED:
            return Text.assemble(name, ": ", shorten(reason, room))
        return Text.assemble(name, ": OK")

    def paint_initial(self, target: Target) -> None:
        """First paint of a row, in row order, right after its decision."""
        if target.row != self._painted:
            raise RenderOrderError(
                f"Initial paint of row {target.row} while row {self._painted} is next"
            )
        if target.status == MountStatus.UNKNOWN:
            raise RenderOrderError(f"{target.local_name} painted before it was decided")
        self._writer.write_line(self.format_line(target))
        self._painted += 1

    def render(self, target: Target) -> None:
        """Rewrite the row owned by `target`."""
        if self._painted < self._total_rows:
            raise RenderOrderError(
                f"Update for row {target.row} before the view was fully painted "
                f"({self._painted}/{self._total_rows})"
            )
        self._cursor.go_to(target.row)
        self._writer.write_line(self.format_line(target))
        self._cursor.was_bumped()

    def finalize(self) -> None:
        """Park the cursor below the last row."""
        if self._painted < self._total_rows:
            # The real cursor already sits below the last painted line
            return
        self._cursor.max_out()
        logging.debug(f"Status view finalized at row {self._cursor.row}")
