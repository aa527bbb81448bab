"""Per-session application state: one author, one book, one store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from lumina.config import StudioConfig
from lumina.core.ledger import RevisionLedger
from lumina.core.pagination import PageSet, PaginationEngine
from lumina.core.store import ManuscriptStore, Outcome
from lumina.models.manuscript import Book, Chapter, Revision
from lumina.models.session import UserProfile
from lumina.storage.manager import SessionStorage

if TYPE_CHECKING:
    from lumina.core.collaborators import (
        LayoutAdvisor,
        OutlineGenerator,
        TextRefiner,
    )
    from lumina.core.scheduler import EventLoop, PersistenceScheduler
    from lumina.models.assist import CoverStyleSuggestion, LayoutSuggestion, Outline

log = logging.getLogger(__name__)

MANUAL_SAVE_LABEL = "Manual save"


class AuthorSession:
    """Everything one editing session owns, passed around explicitly.

    Suggestions from collaborators are requested first and applied only once
    they have been received and validated, so a failed call leaves the
    manuscript untouched.
    """

    def __init__(
        self,
        book: Book,
        config: StudioConfig | None = None,
        storage: SessionStorage | None = None,
        user: UserProfile | None = None,
    ):
        self.config = config or StudioConfig()
        self.storage = storage
        self.user = user
        self.store = ManuscriptStore(book)
        self.ledger = RevisionLedger(self.store, capacity=self.config.revision_capacity)
        self.pagination = PaginationEngine(
            page_chars=self.config.page_chars,
            pages_per_spread=self.config.pages_per_spread,
        )
        self.scheduler: PersistenceScheduler | None = None
        self.active_chapter_id: str = book.chapters[0].id

    @classmethod
    def open(cls, config: StudioConfig) -> AuthorSession:
        """Start a session from the saved state in ``config.data_dir``."""
        storage = SessionStorage(config.data_dir)
        return cls(
            storage.load_book(),
            config=config,
            storage=storage,
            user=storage.load_user(),
        )

    @property
    def book(self) -> Book:
        return self.store.book

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def attach_scheduler(self, loop: EventLoop) -> PersistenceScheduler:
        """Persist changes in the background on ``loop``."""
        from lumina.core.scheduler import PersistenceScheduler

        if self.storage is None:
            raise RuntimeError("session has no storage to write to")
        if self.scheduler is None:
            self.scheduler = PersistenceScheduler(
                self.store,
                self.storage,
                loop,
                debounce=self.config.debounce_seconds,
                min_visible=self.config.min_saving_display,
            )
            self.scheduler.start()
        return self.scheduler

    def commit(self) -> None:
        """Write the book now. Used by one-shot commands with no event loop."""
        if self.storage is None:
            raise RuntimeError("session has no storage to write to")
        saved_at = datetime.now()
        self.storage.save_book(self.book.model_copy(deep=True, update={"last_saved": saved_at}))
        self.store.mark_saved(saved_at)

    # ------------------------------------------------------------------
    # Chapters
    # ------------------------------------------------------------------

    @property
    def active_chapter(self) -> Chapter:
        return self.store.active_chapter(self.active_chapter_id)

    def select_chapter(self, chapter_id: str) -> Chapter:
        chapter = self.store.active_chapter(chapter_id)
        self.active_chapter_id = chapter.id
        return chapter

    def add_chapter(self) -> Chapter:
        chapter_id = self.store.add_chapter()
        return self.select_chapter(chapter_id)

    def edit(self, content: str) -> Outcome:
        return self.store.update_chapter_content(self.active_chapter.id, content)

    def rename(self, title: str) -> Outcome:
        return self.store.update_chapter_title(self.active_chapter.id, title)

    def checkpoint(self, label: str = MANUAL_SAVE_LABEL) -> Revision | None:
        return self.ledger.snapshot(self.active_chapter.id, label)

    def restore(self, revision_id: str) -> Outcome:
        return self.ledger.restore(self.active_chapter.id, revision_id)

    def pages(self) -> PageSet:
        return self.pagination.paginate(self.book)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def apply_outline(self, generator: OutlineGenerator, prompt: str) -> Book:
        """Replace the book with a generated structure.

        Previous chapters and their revisions are discarded.
        """
        return self.apply_outline_result(generator.generate_outline(prompt))

    def apply_outline_result(self, outline: Outline) -> Book:
        book = self.store.apply_outline(outline)
        self.active_chapter_id = book.chapters[0].id
        return book

    def refine(self, refiner: TextRefiner, instruction: str) -> Outcome:
        """Rewrite the active chapter, keeping the original as a revision."""
        chapter = self.active_chapter
        if not instruction.strip():
            return Outcome.miss(chapter.id, "empty instruction")

        refined = refiner.refine(chapter.content, instruction)
        return self.apply_refinement(chapter.id, instruction, refined)

    def apply_refinement(self, chapter_id: str, instruction: str, refined: str) -> Outcome:
        """Checkpoint the chapter, then replace its text with ``refined``."""
        if self.ledger.snapshot(chapter_id, f"Before: {instruction}") is None:
            return Outcome.miss(chapter_id, "unknown chapter")
        return self.store.update_chapter_content(chapter_id, refined)

    def suggest_layout(self, advisor: LayoutAdvisor) -> Outcome:
        meta = self.book.metadata
        return self.apply_layout_suggestion(advisor.suggest_layout(meta.genre, meta.description))

    def apply_layout_suggestion(self, suggestion: LayoutSuggestion) -> Outcome:
        return self.store.update_layout(suggestion.model_dump(exclude_none=True))

    def suggest_cover_style(self, advisor: LayoutAdvisor) -> Outcome:
        meta = self.book.metadata
        return self.apply_cover_suggestion(
            advisor.suggest_cover_style(meta.title, meta.genre, meta.description)
        )

    def apply_cover_suggestion(self, suggestion: CoverStyleSuggestion) -> Outcome:
        return self.store.update_cover_style(suggestion.model_dump(exclude={"visual_prompt"}))

    # ------------------------------------------------------------------
    # User
    # ------------------------------------------------------------------

    def sign_in(self, user: UserProfile) -> None:
        """Remember the user and credit them as author and rights holder."""
        self.user = user
        if self.storage is not None:
            self.storage.save_user(user)
        self.store.update_metadata({"author": user.name, "copyright_holder": user.name})
        log.info("Signed in %s (%s plan)", user.email, user.plan)

    def sign_out(self) -> None:
        self.user = None
        if self.storage is not None:
            self.storage.clear_user()
