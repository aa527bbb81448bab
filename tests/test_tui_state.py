"""Tests for the studio display helpers."""

from lumina.core.scheduler import SaveStatus
from lumina.models.manuscript import Chapter, Revision
from lumina.tui.state import (
    ZOOM_MAX,
    ZOOM_MIN,
    get_chapter_label,
    get_revision_preview,
    get_save_status_display,
    step_zoom,
)


class TestSaveStatus:
    """Persistence indicator."""

    def test_each_status(self):
        assert get_save_status_display(SaveStatus.WRITING) == ("● Saving...", "status-saving")
        assert get_save_status_display(SaveStatus.PENDING)[1] == "status-pending"
        assert get_save_status_display(SaveStatus.IDLE)[0] == "✓ Synced"


class TestLabels:
    """Chapter and revision labels."""

    def test_chapter_label(self):
        assert get_chapter_label(2, Chapter(id="c2", title="Two")) == "2. Two"

    def test_chapter_label_truncated(self):
        label = get_chapter_label(1, Chapter(id="c1", title="x" * 50), max_len=10)
        assert label == "1. xxxxxxx..."

    def test_untitled(self):
        assert get_chapter_label(1, Chapter(id="c1", title="")) == "1. Untitled"

    def test_revision_preview(self):
        revision = Revision(id="r", timestamp="t", content="a\n\nb  c", label="l")
        assert get_revision_preview(revision) == "a b c"

    def test_empty_revision(self):
        revision = Revision(id="r", timestamp="t", content="", label="l")
        assert get_revision_preview(revision) == "(empty)"


class TestZoom:
    """Zoom stepping."""

    def test_step(self):
        assert step_zoom(1.0, 1) == 1.1
        assert step_zoom(1.0, -1) == 0.9

    def test_clamped(self):
        assert step_zoom(ZOOM_MAX, 1) == ZOOM_MAX
        assert step_zoom(ZOOM_MIN, -1) == ZOOM_MIN
