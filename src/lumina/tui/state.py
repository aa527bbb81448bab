"""Display helpers shared by the studio screens."""

from __future__ import annotations

from lumina.core.scheduler import SaveStatus
from lumina.models.manuscript import Chapter, Revision

# Zoom limits and step for the page preview
ZOOM_MIN = 0.5
ZOOM_MAX = 2.0
ZOOM_STEP = 0.1


def get_save_status_display(status: SaveStatus) -> tuple[str, str]:
    """Get status text and style class for the persistence indicator."""
    if status == SaveStatus.WRITING:
        return "● Saving...", "status-saving"
    elif status == SaveStatus.PENDING:
        return "○ Edited", "status-pending"
    else:
        return "✓ Synced", "status-synced"


def get_chapter_label(number: int, chapter: Chapter, max_len: int = 28) -> str:
    """Chapter list label, truncated for the sidebar."""
    title = chapter.title or "Untitled"
    if len(title) > max_len:
        title = title[: max_len - 3] + "..."
    return f"{number}. {title}"


def get_revision_preview(revision: Revision, max_len: int = 60) -> str:
    """Single-line preview of a revision's content."""
    text = " ".join(revision.content.split())
    if not text:
        return "(empty)"
    return text[: max_len - 3] + "..." if len(text) > max_len else text


def step_zoom(zoom: float, direction: int) -> float:
    """Move zoom one step in ``direction`` (+1/-1), clamped to the limits."""
    zoom = round(zoom + direction * ZOOM_STEP, 2)
    return min(ZOOM_MAX, max(ZOOM_MIN, zoom))
