"""Tests for the author session."""

import pytest

from conftest import ManualLoop
from lumina.config import StudioConfig
from lumina.core.collaborators import CollaboratorError
from lumina.core.scheduler import SaveStatus
from lumina.models.manuscript import CoverFilter, FontFamily, Typography
from lumina.models.session import UserProfile
from lumina.session import MANUAL_SAVE_LABEL, AuthorSession
from lumina.storage.manager import SessionStorage


@pytest.fixture
def session(book):
    return AuthorSession(book)


@pytest.fixture
def stored_session(tmp_path):
    return AuthorSession.open(StudioConfig(data_dir=tmp_path))


class TestChapters:
    """Chapter selection and editing."""

    def test_first_chapter_active(self, session):
        assert session.active_chapter.id == "c1"

    def test_select_and_edit(self, session):
        session.select_chapter("c2")
        session.edit("Edited two")

        assert session.book.find_chapter("c2").content == "Edited two"
        assert session.book.find_chapter("c1").content == "First chapter text."

    def test_select_unknown_falls_back(self, session):
        assert session.select_chapter("gone").id == "c1"

    def test_add_chapter_becomes_active(self, session):
        chapter = session.add_chapter()

        assert session.active_chapter.id == chapter.id
        assert chapter.title == "Chapter 3"

    def test_checkpoint_and_restore(self, session):
        revision = session.checkpoint()
        session.edit("Gone soon")

        assert revision.label == MANUAL_SAVE_LABEL
        assert session.restore(revision.id)
        assert session.active_chapter.content == "First chapter text."

    def test_pages(self, session):
        assert session.pages().page_count == 1

    def test_config_capacity_used(self, book):
        session = AuthorSession(book, config=StudioConfig(revision_capacity=3))
        for _ in range(5):
            session.checkpoint()
        assert len(session.active_chapter.revisions) == 3


class TestRefine:
    """Rewriting with a text refiner."""

    def test_refine_keeps_original_as_revision(self, session, assistant):
        outcome = session.refine(assistant, "shout")

        chapter = session.active_chapter
        assert outcome
        assert chapter.content == "FIRST CHAPTER TEXT."
        assert chapter.revisions[0].content == "First chapter text."
        assert chapter.revisions[0].label == "Before: shout"

    def test_failed_refine_changes_nothing(self, session, failing_assistant):
        before = session.book.model_dump()

        with pytest.raises(CollaboratorError):
            session.refine(failing_assistant, "shout")

        assert session.book.model_dump() == before

    def test_empty_instruction_is_noop(self, session, assistant):
        outcome = session.refine(assistant, "   ")

        assert not outcome
        assert assistant.calls == []
        assert session.active_chapter.revisions == []

    def test_refinement_for_removed_chapter_is_dropped(self, session, assistant):
        session.apply_outline(assistant, "idea")

        outcome = session.apply_refinement("c1", "shout", "LATE")

        assert not outcome
        assert all(c.content != "LATE" for c in session.book.chapters)


class TestOutline:
    """Replacing the structure with a generated outline."""

    def test_outline_replaces_chapters(self, session, assistant):
        session.checkpoint()
        old_ids = {c.id for c in session.book.chapters}

        book = session.apply_outline(assistant, "a lighthouse")

        assert len(book.chapters) == 3
        assert old_ids.isdisjoint(c.id for c in book.chapters)
        assert all(c.revisions == [] for c in book.chapters)
        assert book.metadata.title == "The Lighthouse"
        assert session.active_chapter.id == book.chapters[0].id

    def test_failed_outline_changes_nothing(self, session, failing_assistant):
        before = session.book.model_dump()

        with pytest.raises(CollaboratorError):
            session.apply_outline(failing_assistant, "idea")

        assert session.book.model_dump() == before


class TestSuggestions:
    """Layout and cover suggestions."""

    def test_layout_suggestion_applied(self, session, assistant):
        session.suggest_layout(assistant)

        layout = session.book.metadata.layout_preference
        assert layout.style_name == "Harbor"
        assert layout.columns == 2
        assert layout.font_family == FontFamily.SERIF

    def test_cover_suggestion_applied(self, session, assistant):
        session.suggest_cover_style(assistant)

        cover = session.book.metadata.cover_style
        assert cover.typography == Typography.SCRIPT
        assert cover.filter == CoverFilter.NOIR
        assert cover.overlay_opacity == 0.6


class TestPersistence:
    """Saving through storage."""

    def test_open_without_saved_state(self, stored_session):
        assert stored_session.book.metadata.title == "New Book Project"
        assert stored_session.user is None

    def test_commit_writes_and_marks_saved(self, stored_session, tmp_path):
        stored_session.edit("Saved text")
        stored_session.commit()

        reopened = AuthorSession.open(StudioConfig(data_dir=tmp_path))
        assert reopened.active_chapter.content == "Saved text"
        assert stored_session.book.last_saved is not None

    def test_commit_without_storage(self, session):
        with pytest.raises(RuntimeError):
            session.commit()

    def test_attach_scheduler_saves_after_debounce(self, stored_session, tmp_path):
        loop = ManualLoop()
        scheduler = stored_session.attach_scheduler(loop)

        stored_session.edit("Background")
        assert scheduler.status == SaveStatus.PENDING
        loop.advance(2.0)

        saved = SessionStorage(tmp_path).load_book()
        assert saved.chapters[0].content == "Background"

    def test_attach_scheduler_once(self, stored_session):
        loop = ManualLoop()
        assert stored_session.attach_scheduler(loop) is stored_session.attach_scheduler(loop)


class TestUser:
    """Signing in and out."""

    def test_sign_in_credits_author(self, stored_session, tmp_path):
        user = UserProfile.local(name="Ada Lovelace", email="ada@example.com", plan="pro")

        stored_session.sign_in(user)

        meta = stored_session.book.metadata
        assert meta.author == "Ada Lovelace"
        assert meta.copyright_holder == "Ada Lovelace"
        assert SessionStorage(tmp_path).load_user() == user

    def test_sign_out(self, stored_session, tmp_path):
        stored_session.sign_in(UserProfile.local(name="Ada"))
        stored_session.sign_out()

        assert stored_session.user is None
        assert SessionStorage(tmp_path).load_user() is None

    def test_trial_only_for_paid_plans(self):
        assert UserProfile.local(plan="free").trial_ends_at is None
        assert UserProfile.local(plan="studio").trial_ends_at is not None
