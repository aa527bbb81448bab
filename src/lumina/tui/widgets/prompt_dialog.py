"""Single-line text prompt modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, Static


class PromptDialog(ModalScreen[str | None]):
    """Ask for one line of text. Dismisses with None when cancelled."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, title: str, placeholder: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self.dialog_title = title
        self.placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Container(id="dialog"):
            yield Static(f"[bold]{self.dialog_title}[/]", id="dialog-title")
            yield Input(placeholder=self.placeholder, id="prompt-input")
            yield Static("[dim]Enter to send, Esc to cancel[/]", classes="instruction")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        self.dismiss(value or None)

    def action_cancel(self) -> None:
        self.dismiss(None)
