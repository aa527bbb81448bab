"""Textual TUI for writing, revising and previewing a book."""

from lumina.tui.app import StudioApp

__all__ = ["StudioApp"]
