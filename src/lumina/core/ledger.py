"""Bounded per-chapter revision history."""

import logging
from datetime import datetime
from uuid import uuid4

from lumina.core.store import ManuscriptStore, Outcome
from lumina.models.manuscript import Revision

log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class RevisionLedger:
    """Checkpoint and restore chapter content.

    Each chapter keeps at most ``capacity`` revisions, most recent first.
    Revisions are never edited, reordered or removed except by falling off
    the tail when a new one is recorded.
    """

    DEFAULT_CAPACITY = 15

    def __init__(self, store: ManuscriptStore, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("revision capacity must be at least 1")
        self.store = store
        self.capacity = capacity

    def list(self, chapter_id: str) -> list[Revision]:
        chapter = self.store.find_chapter(chapter_id)
        if chapter is None:
            return []
        return list(chapter.revisions)

    def snapshot(self, chapter_id: str, label: str) -> Revision | None:
        """Record the chapter's current content. Returns None on a miss."""
        chapter = self.store.find_chapter(chapter_id)
        if chapter is None:
            log.debug("Snapshot skipped, unknown chapter %s", chapter_id)
            return None

        taken = {r.id for r in chapter.revisions}
        revision_id = uuid4().hex[:9]
        while revision_id in taken:
            revision_id = uuid4().hex[:9]

        revision = Revision(
            id=revision_id,
            timestamp=datetime.now().strftime(TIMESTAMP_FORMAT),
            content=chapter.content,
            label=label,
        )
        chapter.revisions = [revision, *chapter.revisions][: self.capacity]
        log.debug("Snapshot %s of chapter %s (%s)", revision.id, chapter_id, label)
        self.store.notify()
        return revision

    def restore(self, chapter_id: str, revision_id: str) -> Outcome:
        """Put a revision's content back into the chapter.

        Goes through the regular content update, so it is persisted and
        repaginated like any edit. No revision is recorded for the content
        being replaced.
        """
        chapter = self.store.find_chapter(chapter_id)
        if chapter is None:
            return Outcome.miss(chapter_id, "unknown chapter")

        for revision in chapter.revisions:
            if revision.id == revision_id:
                return self.store.update_chapter_content(chapter_id, revision.content)

        return Outcome.miss(chapter_id, f"unknown revision {revision_id}")
