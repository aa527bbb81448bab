"""Tests for the manuscript store."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from lumina.core.store import ManuscriptStore, Outcome
from lumina.models.assist import Outline, OutlineChapter
from lumina.models.manuscript import CoverFilter, FontFamily


class TestChapterUpdates:
    """Title and content updates."""

    def test_update_content_changes_only_target(self, store):
        outcome = store.update_chapter_content("c2", "New text")

        assert outcome.applied
        assert outcome.chapter_id == "c2"
        assert store.find_chapter("c2").content == "New text"
        assert store.find_chapter("c1").content == "First chapter text."

    def test_update_title(self, store):
        assert store.update_chapter_title("c1", "Prologue")
        assert store.find_chapter("c1").title == "Prologue"

    def test_unknown_chapter_is_a_noop(self, store, book):
        before = book.model_dump()

        outcome = store.update_chapter_content("nope", "text")

        assert not outcome
        assert outcome.reason == "unknown chapter"
        assert store.book.model_dump() == before

    def test_empty_content_allowed(self, store):
        assert store.update_chapter_content("c1", "")
        assert store.find_chapter("c1").content == ""

    def test_revisions_untouched_by_content_edit(self, store, ledger):
        ledger.snapshot("c1", "Manual save")

        store.update_chapter_content("c1", "Changed")

        assert len(store.find_chapter("c1").revisions) == 1
        assert store.find_chapter("c1").revisions[0].content == "First chapter text."


class TestAddChapter:
    """Appending chapters."""

    def test_add_chapter_appends_numbered_chapter(self, store):
        chapter_id = store.add_chapter()

        assert store.chapters[-1].id == chapter_id
        assert store.chapters[-1].title == "Chapter 3"
        assert store.chapters[-1].content == ""
        assert store.chapters[-1].revisions == []

    def test_ids_unique_when_added_quickly(self, store):
        ids = {store.add_chapter() for _ in range(20)}

        assert len(ids) == 20
        assert len({c.id for c in store.chapters}) == 22

    def test_mint_stamp_strictly_increases(self, store):
        stamps = [store.mint_stamp() for _ in range(50)]
        assert stamps == sorted(set(stamps))


class TestMetadata:
    """Metadata, layout and cover updates."""

    def test_partial_update_keeps_other_fields(self, store):
        store.update_metadata({"title": "Renamed"})

        assert store.book.metadata.title == "Renamed"
        assert store.book.metadata.author == "Ada"

    def test_invalid_value_raises_and_keeps_metadata(self, store):
        with pytest.raises(ValidationError):
            store.update_metadata({"series_index": "not a number"})

        assert store.book.metadata.title == "Test Book"

    def test_tags_deduplicated(self, store):
        store.update_metadata({"tags": ["noir", "draft", "noir"]})
        assert store.book.metadata.tags == ["noir", "draft"]

    def test_update_layout_merges(self, store):
        store.update_layout({"columns": 2, "font_family": FontFamily.SANS})

        layout = store.book.metadata.layout_preference
        assert layout.columns == 2
        assert layout.font_family == FontFamily.SANS
        assert layout.margins == "12%"

    def test_layout_rejects_three_columns(self, store):
        with pytest.raises(ValidationError):
            store.update_layout({"columns": 3})

    def test_update_cover_style(self, store):
        store.update_cover_style({"filter": "noir", "overlay_opacity": 0.7})

        cover = store.book.metadata.cover_style
        assert cover.filter == CoverFilter.NOIR
        assert cover.overlay_opacity == 0.7

    def test_cover_opacity_bounded(self, store):
        with pytest.raises(ValidationError):
            store.update_cover_style({"overlay_opacity": 0.9})


class TestReplaceStructure:
    """Outline-driven structure replacement."""

    def test_apply_outline_replaces_chapters(self, store, ledger):
        ledger.snapshot("c1", "Manual save")
        old_ids = {c.id for c in store.chapters}
        outline = Outline(
            title="New Title",
            plot_summary="Summary",
            chapters=[
                OutlineChapter(title="A", objective="open"),
                OutlineChapter(title="B", objective="middle"),
                OutlineChapter(title="C", objective="close"),
            ],
        )

        book = store.apply_outline(outline)

        assert [c.title for c in book.chapters] == ["A", "B", "C"]
        assert book.chapters[0].content == "[Objective: open]\n\n"
        assert all(c.revisions == [] for c in book.chapters)
        assert old_ids.isdisjoint(c.id for c in book.chapters)
        assert book.metadata.title == "New Title"
        assert book.metadata.description == "Summary"
        assert book.metadata.author == "Ada"
        assert book.last_saved is not None
        assert store.book is book

    def test_outline_ids_follow_position(self, store):
        book = store.replace_structure({}, [("A", ""), ("B", "")])

        assert book.chapters[0].id.startswith("ai-c0-")
        assert book.chapters[1].id.startswith("ai-c1-")
        assert book.id == book.chapters[0].id.split("-")[-1]

    def test_empty_structure_rejected(self, store):
        with pytest.raises(ValueError):
            store.replace_structure({}, [])

    def test_old_ids_miss_after_replacement(self, store):
        store.replace_structure({}, [("A", "")])

        assert not store.update_chapter_content("c1", "late edit")


class TestListeners:
    """Change notification."""

    def test_listener_called_on_applied_change(self, store):
        seen = []
        store.subscribe(seen.append)

        store.update_chapter_content("c1", "x")
        store.add_chapter()

        assert len(seen) == 2
        assert seen[-1] is store.book

    def test_listener_not_called_on_miss(self, store):
        seen = []
        store.subscribe(seen.append)

        store.update_chapter_title("missing", "x")

        assert seen == []

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        store.update_chapter_content("c1", "x")

        assert seen == []

    def test_mark_saved_does_not_notify(self, store):
        seen = []
        store.subscribe(seen.append)

        store.mark_saved(datetime(2024, 1, 1, 12, 0))

        assert seen == []
        assert store.book.last_saved == datetime(2024, 1, 1, 12, 0)


class TestActiveChapter:
    """Resolving the active chapter."""

    def test_known_id(self, store):
        assert store.active_chapter("c2").id == "c2"

    def test_falls_back_to_first(self, store):
        assert store.active_chapter("gone").id == "c1"
        assert store.active_chapter(None).id == "c1"


def test_outcome_truthiness():
    assert Outcome(applied=True)
    assert not Outcome.miss("c1", "unknown chapter")


def test_store_holds_given_book(book):
    assert ManuscriptStore(book).book is book
