from .status_renderer import CursorTracker, StatusRenderer, shorten
from .terminal_writer import CapturingTerminalWriter, ConsoleTerminalWriter, TerminalWriter

__all__ = [
    "CursorTracker",
    "StatusRenderer",
    "shorten",
    "CapturingTerminalWriter",
    "ConsoleTerminalWriter",
    "TerminalWriter",
]
