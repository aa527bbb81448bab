"""Write screen: chapter list and editor."""

from __future__ import annotations

import asyncio

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Input, Static, TextArea

from lumina.core.collaborators import CollaboratorError
from lumina.tui.state import get_chapter_label


class WriteScreen(Screen):
    """Edit chapter titles and text."""

    BINDINGS = [
        Binding("ctrl+n", "add_chapter", "New chapter", show=True),
        Binding("ctrl+s", "checkpoint", "Checkpoint", show=True),
        Binding("ctrl+r", "refine", "Refine", show=True),
        Binding("ctrl+o", "outline", "Outline", show=True),
        Binding("ctrl+e", "muse", "Muse", show=False),
    ]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._loading = False

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header()
        with Horizontal(id="main"):
            yield DataTable(id="chapter-table", cursor_type="row")
            with Vertical(id="editor-pane"):
                yield Input(placeholder="Chapter title...", id="chapter-title")
                yield TextArea(id="chapter-content", soft_wrap=True)
                yield Static(id="editor-status", classes="instruction")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#chapter-table", DataTable)
        table.add_column("Chapters", key="title")
        table.zebra_stripes = True
        self._populate_chapters()
        self._load_active()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _populate_chapters(self) -> None:
        session = self.app.session
        table = self.query_one("#chapter-table", DataTable)
        table.clear()
        active_row = 0
        for number, chapter in enumerate(session.book.chapters, 1):
            table.add_row(get_chapter_label(number, chapter), key=chapter.id)
            if chapter.id == session.active_chapter.id:
                active_row = number - 1
        table.move_cursor(row=active_row)

    def _load_active(self) -> None:
        """Show the active chapter in the editor without recording an edit."""
        chapter = self.app.session.active_chapter
        self._loading = True
        try:
            self.query_one("#chapter-title", Input).value = chapter.title
            self.query_one("#chapter-content", TextArea).load_text(chapter.content)
        finally:
            self._loading = False
        self._update_status()

    def _update_status(self) -> None:
        chapter = self.app.session.active_chapter
        self.query_one("#editor-status", Static).update(
            f"[dim]{chapter.word_count:,} words · {len(chapter.revisions)} revision(s)[/]"
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is None or event.row_key.value is None:
            return
        session = self.app.session
        if event.row_key.value == session.active_chapter.id:
            return
        session.select_chapter(event.row_key.value)
        self._load_active()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self._loading:
            return
        session = self.app.session
        if event.text_area.text != session.active_chapter.content:
            session.edit(event.text_area.text)
            self._update_status()

    def on_input_changed(self, event: Input.Changed) -> None:
        if self._loading or event.input.id != "chapter-title":
            return
        session = self.app.session
        if event.value != session.active_chapter.title:
            session.rename(event.value)
            table = self.query_one("#chapter-table", DataTable)
            number = session.book.chapters.index(session.active_chapter) + 1
            table.update_cell(
                session.active_chapter.id,
                "title",
                get_chapter_label(number, session.active_chapter),
            )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_add_chapter(self) -> None:
        self.app.session.add_chapter()
        self._populate_chapters()
        self._load_active()
        self.query_one("#chapter-title", Input).focus()

    def action_checkpoint(self) -> None:
        revision = self.app.session.checkpoint()
        if revision is not None:
            self.notify(f"Checkpoint {revision.id} saved")
        self._update_status()

    def action_refine(self) -> None:
        from lumina.tui.widgets import PromptDialog

        if self.app.assistant is None:
            self.notify("No assistant configured.", severity="warning")
            return

        def on_instruction(instruction: str | None) -> None:
            if instruction:
                self.run_worker(self._refine(instruction), exclusive=True)

        self.app.push_screen(
            PromptDialog("Refine chapter", "e.g. make the dialogue tighter"),
            on_instruction,
        )

    async def _refine(self, instruction: str) -> None:
        session = self.app.session
        chapter = session.active_chapter
        editor = self.query_one("#chapter-content", TextArea)
        editor.read_only = True
        self.notify(f"Refining '{chapter.title}'...")
        try:
            refined = await asyncio.to_thread(
                self.app.assistant.refine, chapter.content, instruction
            )
        except CollaboratorError as e:
            self._show_failure("Refine failed", e)
            return
        finally:
            editor.read_only = False

        session.apply_refinement(chapter.id, instruction, refined)
        if session.active_chapter.id == chapter.id:
            self._load_active()
        self.notify("Chapter refined. The previous text is in History.")

    def action_outline(self) -> None:
        from lumina.tui.widgets import ConfirmDialog, PromptDialog

        if self.app.assistant is None:
            self.notify("No assistant configured.", severity="warning")
            return

        def on_idea(idea: str | None) -> None:
            if idea:
                self.run_worker(self._outline(idea), exclusive=True)

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.app.push_screen(PromptDialog("Book idea", "A lighthouse keeper..."), on_idea)

        self.app.push_screen(
            ConfirmDialog(
                "Replace all chapters?",
                "A generated outline replaces every chapter and its revisions.",
                confirm_label="Replace",
            ),
            on_confirm,
        )

    async def _outline(self, idea: str) -> None:
        self.notify("Drafting outline...")
        try:
            outline = await asyncio.to_thread(self.app.assistant.generate_outline, idea)
        except CollaboratorError as e:
            self._show_failure("Outline failed", e)
            return

        self.app.session.apply_outline_result(outline)
        self._populate_chapters()
        self._load_active()
        self.notify(f"Outline applied: {len(outline.chapters)} chapters")

    def action_muse(self) -> None:
        if self.app.assistant is None:
            return
        self.run_worker(self._muse(), exclusive=True)

    async def _muse(self) -> None:
        session = self.app.session
        try:
            hint = await asyncio.to_thread(
                self.app.assistant.muse,
                session.active_chapter.content,
                session.book.metadata.genre,
            )
        except CollaboratorError as e:
            self.notify(f"Muse unavailable: {e.message}", severity="warning")
            return
        if hint:
            self.notify(hint, title="Muse", timeout=10)
        else:
            self.notify("Write a little more before asking the muse.")

    def _show_failure(self, title: str, error: CollaboratorError) -> None:
        self.notify(
            f"{error.message}\nYour manuscript was not changed.",
            title=title,
            severity="error",
            timeout=10,
        )
