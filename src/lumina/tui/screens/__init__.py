"""TUI screens for the studio."""

from lumina.tui.screens.history import HistoryScreen
from lumina.tui.screens.preview import PreviewScreen
from lumina.tui.screens.write import WriteScreen

__all__ = [
    "WriteScreen",
    "HistoryScreen",
    "PreviewScreen",
]
