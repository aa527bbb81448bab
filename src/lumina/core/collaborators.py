"""Contracts for the services that feed suggestions into the manuscript."""

from typing import Protocol

from lumina.models.assist import (
    CoverStyleSuggestion,
    ExportArtifact,
    LayoutSuggestion,
    Outline,
)
from lumina.models.manuscript import Book


class CollaboratorError(Exception):
    """A collaborator call failed; nothing was applied to the manuscript."""

    def __init__(self, error_type: str, message: str, code: int | None = None):
        self.error_type = error_type
        self.message = message
        self.code = code
        super().__init__(f"{error_type}: {message}")


class OutlineGenerator(Protocol):
    def generate_outline(self, prompt: str) -> Outline: ...


class TextRefiner(Protocol):
    def refine(self, content: str, instruction: str) -> str: ...


class LayoutAdvisor(Protocol):
    def suggest_layout(self, genre: str, description: str) -> LayoutSuggestion: ...

    def suggest_cover_style(
        self, title: str, genre: str, description: str
    ) -> CoverStyleSuggestion: ...


class MuseAdvisor(Protocol):
    def muse(self, content: str, genre: str) -> str: ...


class ExportEncoder(Protocol):
    """Turns a read-only copy of the book into a named byte stream."""

    format_name: str

    def encode(self, book: Book) -> ExportArtifact: ...
