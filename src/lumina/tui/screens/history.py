"""History screen: a chapter's revisions."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from lumina.tui.state import get_revision_preview


class HistoryScreen(Screen):
    """Browse and restore checkpoints of the active chapter."""

    BINDINGS = [
        Binding("enter", "restore", "Restore", show=True, priority=True),
        Binding("c", "checkpoint", "Checkpoint", show=True),
    ]

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header()
        with Container(id="main"):
            yield Static(id="history-info")
            yield DataTable(id="revision-table", cursor_type="row")
            yield Static(id="revision-preview")
            yield Static(
                "[dim]Restoring replaces the current text without keeping it. "
                "Checkpoint first if you may want it back.[/]",
                classes="instruction",
            )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#revision-table", DataTable)
        table.add_column("Saved", key="saved", width=20)
        table.add_column("Label", key="label")
        table.add_column("Words", key="words", width=8)
        table.zebra_stripes = True
        self._populate()

    def _populate(self) -> None:
        session = self.app.session
        chapter = session.active_chapter
        capacity = session.ledger.capacity

        self.query_one("#history-info", Static).update(
            f"[bold]{chapter.title}[/]\n"
            f"[dim]{len(chapter.revisions)} of {capacity} revisions kept, most recent first[/]"
        )

        table = self.query_one("#revision-table", DataTable)
        table.clear()
        for revision in chapter.revisions:
            table.add_row(
                revision.timestamp,
                revision.label,
                str(len(revision.content.split())),
                key=revision.id,
            )
        if not chapter.revisions:
            self.query_one("#revision-preview", Static).update("[dim]No revisions yet[/]")

    def _selected_revision_id(self) -> str | None:
        table = self.query_one("#revision-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return row_key.value

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is None:
            return
        chapter = self.app.session.active_chapter
        for revision in chapter.revisions:
            if revision.id == event.row_key.value:
                self.query_one("#revision-preview", Static).update(
                    f"[dim]{get_revision_preview(revision, 240)}[/]"
                )
                return

    def action_restore(self) -> None:
        revision_id = self._selected_revision_id()
        if revision_id is None:
            return
        if self.app.session.restore(revision_id):
            self.notify("Revision restored")
        else:
            self.notify("That revision no longer exists.", severity="warning")
            self._populate()

    def action_checkpoint(self) -> None:
        if self.app.session.checkpoint() is not None:
            self._populate()
