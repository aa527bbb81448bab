"""Data models."""

from lumina.models.assist import (
    CoverStyleSuggestion,
    ExportArtifact,
    LayoutSuggestion,
    Outline,
    OutlineChapter,
)
from lumina.models.manuscript import (
    Book,
    BookMetadata,
    Chapter,
    CoverFilter,
    CoverStyle,
    FontFamily,
    LayoutPreference,
    Revision,
    Typography,
    template_book,
)
from lumina.models.session import PlanType, UserProfile

__all__ = [
    # Manuscript models
    "Book",
    "BookMetadata",
    "Chapter",
    "Revision",
    "LayoutPreference",
    "CoverStyle",
    "FontFamily",
    "Typography",
    "CoverFilter",
    "template_book",
    # Session models
    "PlanType",
    "UserProfile",
    # Assistant payloads
    "Outline",
    "OutlineChapter",
    "LayoutSuggestion",
    "CoverStyleSuggestion",
    "ExportArtifact",
]
