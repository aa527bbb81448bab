"""Main Textual application for the studio."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from lumina.core.scheduler import SaveStatus
from lumina.tui.state import get_save_status_display

if TYPE_CHECKING:
    from lumina.core.gemini import GeminiAssistant
    from lumina.session import AuthorSession

log = logging.getLogger(__name__)


class StudioApp(App):
    """Editor, revision history and page preview for one session."""

    CSS_PATH = "styles.tcss"
    TITLE = "Lumina Studio"

    BINDINGS = [
        Binding("f1", "show_write", "Write", show=True),
        Binding("f2", "show_history", "History", show=True),
        Binding("f3", "show_preview", "Preview", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        session: AuthorSession,
        assistant: GeminiAssistant | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.theme = "monokai"
        self.session = session
        self.assistant = assistant

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        """Start background saving and open the editor."""
        from lumina.tui.screens import WriteScreen

        if self.session.storage is not None:
            scheduler = self.session.attach_scheduler(asyncio.get_running_loop())
            scheduler.on_status(self._on_save_status)
        self._on_save_status(SaveStatus.IDLE)
        self.push_screen(WriteScreen())

    def _on_save_status(self, status: SaveStatus) -> None:
        text, _ = get_save_status_display(status)
        self.sub_title = f"{self.session.book.metadata.title}  {text}"

    def on_unmount(self) -> None:
        self._flush()

    def _flush(self) -> None:
        """Write edits still waiting for the debounce timer."""
        scheduler = self.session.scheduler
        if scheduler is not None and scheduler.is_pending:
            scheduler.stop()
            try:
                self.session.commit()
            except OSError:
                log.exception("Final save failed")

    def action_show_write(self) -> None:
        from lumina.tui.screens import WriteScreen

        self.switch_screen(WriteScreen())

    def action_show_history(self) -> None:
        from lumina.tui.screens import HistoryScreen

        self.switch_screen(HistoryScreen())

    def action_show_preview(self) -> None:
        from lumina.tui.screens import PreviewScreen

        self.switch_screen(PreviewScreen())

    def action_quit(self) -> None:
        """Quit the application."""
        self._flush()
        self.exit(0)
