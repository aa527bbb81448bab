"""Preview screen: two-page spreads of the paginated book."""

from __future__ import annotations

import asyncio

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from lumina.core.collaborators import CollaboratorError
from lumina.core.content_processor import ContentProcessor
from lumina.core.pagination import SpreadCursor, present_page
from lumina.models.manuscript import FontFamily
from lumina.tui.state import step_zoom


class PreviewScreen(Screen):
    """Browse the book one spread at a time."""

    BINDINGS = [
        Binding("left", "previous_spread", "Prev", show=True),
        Binding("right", "next_spread", "Next", show=True),
        Binding("plus", "zoom(1)", "Zoom in", show=True),
        Binding("minus", "zoom(-1)", "Zoom out", show=True),
        Binding("c", "toggle_columns", "Columns", show=True),
        Binding("f", "toggle_font", "Font", show=True),
        Binding("s", "suggest_layout", "Suggest", show=True),
    ]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.zoom = 1.0
        self.processor = ContentProcessor()
        self.cursor: SpreadCursor | None = None

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header()
        with Container(id="main"):
            with Horizontal(id="spread"):
                yield Static(id="page-left", classes="page")
                yield Static(id="page-right", classes="page")
            yield Static(id="spread-info", classes="instruction")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh()

    def _refresh(self) -> None:
        """Repaginate if needed and draw the current spread."""
        from lumina.commands.preview import render_page

        session = self.app.session
        pages = session.pages()
        if self.cursor is None:
            self.cursor = SpreadCursor(pages.page_count, pages.pages_per_spread)
        else:
            self.cursor.resize(pages.page_count)

        layout = session.book.metadata.layout_preference
        title = session.book.metadata.title
        slots = [self.query_one("#page-left", Static), self.query_one("#page-right", Static)]
        visible = self.cursor.visible()
        for slot_index, slot in enumerate(slots):
            if slot_index < len(visible):
                view = present_page(pages, visible[slot_index], layout, title, self.zoom)
                slot.update(render_page(view, self.processor, self.zoom))
                slot.display = True
            else:
                slot.display = False

        self.query_one("#spread-info", Static).update(
            f"[dim]Spread[/] [bold]{self.cursor.sheet} / {self.cursor.sheet_count}[/]   "
            f"[dim]Style:[/] {layout.style_name}   "
            f"[dim]Zoom:[/] {round(self.zoom * 100)}%   "
            f"[dim]{layout.columns} col · {layout.font_family.value} · x{layout.font_scale:.2f}[/]"
        )

    def action_previous_spread(self) -> None:
        if self.cursor is not None and self.cursor.previous():
            self._refresh()

    def action_next_spread(self) -> None:
        if self.cursor is not None and self.cursor.next():
            self._refresh()

    def action_zoom(self, direction: int) -> None:
        self.zoom = step_zoom(self.zoom, direction)
        self._refresh()

    def action_toggle_columns(self) -> None:
        layout = self.app.session.book.metadata.layout_preference
        self.app.session.store.update_layout({"columns": 2 if layout.columns == 1 else 1})
        self._refresh()

    def action_toggle_font(self) -> None:
        layout = self.app.session.book.metadata.layout_preference
        font = FontFamily.SANS if layout.font_family == FontFamily.SERIF else FontFamily.SERIF
        self.app.session.store.update_layout({"font_family": font})
        self._refresh()

    def action_suggest_layout(self) -> None:
        if self.app.assistant is None:
            self.notify("No assistant configured.", severity="warning")
            return
        self.run_worker(self._suggest_layout(), exclusive=True)

    async def _suggest_layout(self) -> None:
        meta = self.app.session.book.metadata
        self.notify("Asking for a layout...")
        try:
            suggestion = await asyncio.to_thread(
                self.app.assistant.suggest_layout, meta.genre, meta.description
            )
        except CollaboratorError as e:
            self.notify(f"Layout suggestion failed: {e.message}", severity="error")
            return

        self.app.session.apply_layout_suggestion(suggestion)
        self.notify(f"Applied layout '{suggestion.style_name}'")
        self._refresh()
