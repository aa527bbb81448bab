"""Manuscript store: the single owner of the Book aggregate."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from lumina.models.assist import Outline
from lumina.models.manuscript import Book, BookMetadata, Chapter

log = logging.getLogger(__name__)

Listener = Callable[[Book], None]


@dataclass(frozen=True)
class Outcome:
    """Result of a lookup-or-no-op operation."""

    applied: bool
    chapter_id: str | None = None
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.applied

    @classmethod
    def miss(cls, chapter_id: str | None, reason: str) -> "Outcome":
        log.debug("No-op on %s: %s", chapter_id, reason)
        return cls(applied=False, chapter_id=chapter_id, reason=reason)


class ManuscriptStore:
    """Holds the canonical Book and applies every mutation to it.

    Mutations on unknown chapter ids do nothing and report it through the
    returned ``Outcome``; callers may race with a structure replacement, so
    a miss is never an error. Listeners are called synchronously after each
    applied mutation and never after a miss.
    """

    def __init__(self, book: Book):
        self._book = book
        self._listeners: list[Listener] = []
        self._last_stamp = 0

    @property
    def book(self) -> Book:
        return self._book

    @property
    def chapters(self) -> list[Chapter]:
        return self._book.chapters

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self._book)

    def mint_stamp(self) -> int:
        """Millisecond timestamp, strictly increasing within this store."""
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_chapter(self, chapter_id: str) -> Chapter | None:
        return self._book.find_chapter(chapter_id)

    def active_chapter(self, chapter_id: str | None) -> Chapter:
        """Resolve a chapter id, falling back to the first chapter."""
        if chapter_id is not None:
            chapter = self.find_chapter(chapter_id)
            if chapter is not None:
                return chapter
        return self._book.chapters[0]

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def update_metadata(self, partial: dict[str, Any]) -> Outcome:
        """Shallow-merge ``partial`` into the metadata.

        Raises pydantic.ValidationError if a value does not conform to its
        field type.
        """
        merged = {**self._book.metadata.model_dump(), **partial}
        self._book.metadata = BookMetadata.model_validate(merged)
        self._changed()
        return Outcome(applied=True)

    def update_layout(self, changes: dict[str, Any]) -> Outcome:
        """Replace the layout preference with the current one plus ``changes``."""
        current = self._book.metadata.layout_preference.model_dump()
        return self.update_metadata({"layout_preference": {**current, **changes}})

    def update_cover_style(self, changes: dict[str, Any]) -> Outcome:
        """Replace the cover style with the current one plus ``changes``."""
        current = self._book.metadata.cover_style.model_dump()
        return self.update_metadata({"cover_style": {**current, **changes}})

    # ------------------------------------------------------------------
    # Chapters
    # ------------------------------------------------------------------

    def update_chapter_title(self, chapter_id: str, title: str) -> Outcome:
        chapter = self.find_chapter(chapter_id)
        if chapter is None:
            return Outcome.miss(chapter_id, "unknown chapter")
        chapter.title = title
        self._changed()
        return Outcome(applied=True, chapter_id=chapter_id)

    def update_chapter_content(self, chapter_id: str, content: str) -> Outcome:
        chapter = self.find_chapter(chapter_id)
        if chapter is None:
            return Outcome.miss(chapter_id, "unknown chapter")
        chapter.content = content
        self._changed()
        return Outcome(applied=True, chapter_id=chapter_id)

    def add_chapter(self) -> str:
        """Append an empty, auto-numbered chapter and return its id."""
        chapter_id = f"c{self.mint_stamp()}"
        while self.find_chapter(chapter_id) is not None:
            chapter_id = f"c{self.mint_stamp()}"
        number = len(self._book.chapters) + 1
        self._book.chapters.append(Chapter(id=chapter_id, title=f"Chapter {number}"))
        self._changed()
        return chapter_id

    def replace_structure(
        self, metadata_fields: dict[str, Any], chapters: list[tuple[str, str]]
    ) -> Book:
        """Replace the whole book with a new chapter set.

        ``chapters`` is a list of (title, content) pairs. Every chapter gets a
        freshly minted id and all previous chapters and revisions are dropped.
        """
        if not chapters:
            raise ValueError("a book needs at least one chapter")

        stamp = self.mint_stamp()
        new_chapters = [
            Chapter(id=f"ai-c{idx}-{stamp}", title=title, content=content)
            for idx, (title, content) in enumerate(chapters)
        ]
        metadata = BookMetadata.model_validate(
            {**self._book.metadata.model_dump(), **metadata_fields}
        )
        log.info(
            "Replacing structure of book %s with %d chapters",
            self._book.id,
            len(new_chapters),
        )
        self._book = Book(
            id=str(stamp),
            metadata=metadata,
            chapters=new_chapters,
            last_saved=datetime.now(),
        )
        self._changed()
        return self._book

    def apply_outline(self, outline: Outline) -> Book:
        """Replace the book with a generated outline, one chapter per entry."""
        return self.replace_structure(
            {"title": outline.title, "description": outline.plot_summary},
            [(ch.title, f"[Objective: {ch.objective}]\n\n") for ch in outline.chapters],
        )

    def mark_saved(self, saved_at: datetime) -> None:
        """Record the time of the last durable write (not a content change)."""
        self._book.last_saved = saved_at

    def notify(self) -> None:
        """Publish a change made through a collaborating component."""
        self._changed()
