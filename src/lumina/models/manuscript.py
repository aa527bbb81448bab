"""Data models for the manuscript aggregate (book, chapters, revisions)."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, field_validator


class FontFamily(str, Enum):
    """Body text font family used by the page preview."""

    SERIF = "serif"
    SANS = "sans"


class Typography(str, Enum):
    """Cover title typography."""

    SERIF = "serif"
    SANS = "sans"
    SCRIPT = "script"


class CoverFilter(str, Enum):
    """Named visual filter applied to the cover image."""

    NONE = "none"
    SEPIA = "sepia"
    VINTAGE = "vintage"
    NOIR = "noir"
    WARM = "warm"
    COLD = "cold"
    HIGH_CONTRAST = "high-contrast"
    DREAMY = "dreamy"


class LayoutPreference(BaseModel):
    """Typographic parameters for the paginated preview."""

    paper_size: str = "A5 paper (148 x 210 mm)"
    font_scale: PositiveFloat = 1.0  # practical range 0.8 - 1.5
    margins: str = "12%"
    columns: Literal[1, 2] = 1
    line_height: PositiveFloat = 1.6
    style_name: str = "Standard"
    font_family: FontFamily = FontFamily.SERIF


class CoverStyle(BaseModel):
    """Cover presentation settings (stored, never rendered here)."""

    typography: Typography = Typography.SERIF
    filter: CoverFilter = CoverFilter.NONE
    overlay_opacity: float = Field(default=0.4, ge=0.0, le=0.8)


class Revision(BaseModel):
    """Immutable snapshot of a chapter's content."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str  # display-formatted creation time
    content: str
    label: str


class Chapter(BaseModel):
    """A titled unit of manuscript text with its own revision history."""

    id: str
    title: str
    content: str = ""
    revisions: list[Revision] = Field(default_factory=list)  # most recent first

    @property
    def word_count(self) -> int:
        return len(self.content.split())


class BookMetadata(BaseModel):
    """Book-level metadata."""

    title: str
    author: str = ""
    publisher: str = ""
    isbn: str = ""
    genre: str = ""
    series: str | None = None
    series_index: int | None = None
    language: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    cover_url: str | None = None
    cover_style: CoverStyle = Field(default_factory=CoverStyle)
    copyright_holder: str = ""
    copyright_year: str = ""
    license: str = ""
    legal_notice: str = ""
    layout_preference: LayoutPreference = Field(default_factory=LayoutPreference)

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, tags: list[str]) -> list[str]:
        """Tags behave as a set; keep the first occurrence of each."""
        return list(dict.fromkeys(tags))


class Book(BaseModel):
    """The manuscript aggregate root."""

    id: str
    metadata: BookMetadata
    chapters: list[Chapter] = Field(min_length=1)
    last_saved: datetime | None = None

    @field_validator("chapters")
    @classmethod
    def unique_chapter_ids(cls, chapters: list[Chapter]) -> list[Chapter]:
        ids = [c.id for c in chapters]
        if len(set(ids)) != len(ids):
            raise ValueError("chapter ids must be unique within a book")
        return chapters

    def find_chapter(self, chapter_id: str) -> Chapter | None:
        """Return the chapter with the given id, if any."""
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        return None


def template_book() -> Book:
    """Build the starter book used when no saved session exists."""
    return Book(
        id="1",
        metadata=BookMetadata(
            title="New Book Project",
            author="Unknown Author",
            publisher="Lumina Press",
            isbn="Pending",
            genre="Fiction",
            language="English",
            description="A new adventure waiting to be written...",
            tags=["draft"],
            copyright_year=str(datetime.now().year),
            license="All rights reserved",
        ),
        chapters=[Chapter(id="c1", title="Chapter 1: The Beginning")],
    )
