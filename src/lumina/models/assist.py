"""Payloads exchanged with the writing-assistant collaborators."""

from pydantic import BaseModel, Field, PositiveFloat

from lumina.models.manuscript import CoverFilter, FontFamily, Typography


class OutlineChapter(BaseModel):
    """One chapter of a generated outline."""

    title: str
    objective: str


class Outline(BaseModel):
    """Book structure proposed by an outline generator."""

    title: str
    plot_summary: str
    chapters: list[OutlineChapter] = Field(min_length=1)


class LayoutSuggestion(BaseModel):
    """Layout parameters proposed by a layout advisor."""

    paper_size: str
    font_scale: PositiveFloat
    margins: str
    columns: int = Field(ge=1, le=2)
    line_height: PositiveFloat
    style_name: str
    font_family: FontFamily | None = None


class CoverStyleSuggestion(BaseModel):
    """Cover settings proposed by a layout advisor."""

    typography: Typography
    filter: CoverFilter
    overlay_opacity: float = Field(ge=0.0, le=0.8)
    visual_prompt: str = ""  # consumed by image generation, not stored


class ExportArtifact(BaseModel):
    """A named byte stream produced by an export encoder."""

    name: str
    media_type: str
    data: bytes
