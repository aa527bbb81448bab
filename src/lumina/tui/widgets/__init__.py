"""Reusable TUI widgets."""

from lumina.tui.widgets.confirm_dialog import ConfirmDialog
from lumina.tui.widgets.prompt_dialog import PromptDialog

__all__ = ["ConfirmDialog", "PromptDialog"]
