"""Shared fixtures for the test suite."""

import heapq
from itertools import count

import pytest

from lumina.core.collaborators import CollaboratorError
from lumina.core.ledger import RevisionLedger
from lumina.core.store import ManuscriptStore
from lumina.models.assist import (
    CoverStyleSuggestion,
    LayoutSuggestion,
    Outline,
    OutlineChapter,
)
from lumina.models.manuscript import Book, BookMetadata, Chapter, template_book


class ManualHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualLoop:
    """Event loop stand-in whose clock only moves when told to."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = count()

    def time(self):
        return self.now

    def call_later(self, delay, callback, *args):
        handle = ManualHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle, callback, args))
        return handle

    def advance_to(self, when):
        """Run every callback due at or before ``when``, in order."""
        while self._queue and self._queue[0][0] <= when:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                callback(*args)
        self.now = when

    def advance(self, seconds):
        self.advance_to(self.now + seconds)


class RecordingWriter:
    """BookWriter that keeps every book it was asked to save."""

    def __init__(self, fail=False):
        self.saved = []
        self.fail = fail

    def save_book(self, book):
        if self.fail:
            raise OSError("disk full")
        self.saved.append(book)


class FakeAssistant:
    """In-memory stand-in for the Gemini assistant."""

    MUSE_MIN_CHARS = 50

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def _maybe_fail(self):
        if self.fail:
            raise CollaboratorError("CLI_ERROR", "assistant unavailable", code=1)

    def generate_outline(self, prompt):
        self.calls.append(("outline", prompt))
        self._maybe_fail()
        return Outline(
            title="The Lighthouse",
            plot_summary="A keeper finds a message in a bottle.",
            chapters=[
                OutlineChapter(title="Arrival", objective="Introduce the keeper"),
                OutlineChapter(title="The Bottle", objective="Find the message"),
                OutlineChapter(title="Departure", objective="Leave the island"),
            ],
        )

    def refine(self, content, instruction):
        self.calls.append(("refine", instruction))
        self._maybe_fail()
        return content.upper()

    def muse(self, content, genre):
        self.calls.append(("muse", genre))
        self._maybe_fail()
        return "Let the silence do more of the work."

    def suggest_layout(self, genre, description):
        self.calls.append(("layout", genre))
        self._maybe_fail()
        return LayoutSuggestion(
            paper_size="US Trade",
            font_scale=1.1,
            margins="15%",
            columns=2,
            line_height=1.5,
            style_name="Harbor",
        )

    def suggest_cover_style(self, title, genre, description):
        self.calls.append(("cover", title))
        self._maybe_fail()
        return CoverStyleSuggestion(
            typography="script",
            filter="noir",
            overlay_opacity=0.6,
            visual_prompt="A lighthouse at dusk",
        )


def make_book(*chapters):
    """Book with the given (id, title, content) chapters."""
    return Book(
        id="b1",
        metadata=BookMetadata(title="Test Book", author="Ada", genre="Mystery"),
        chapters=[Chapter(id=cid, title=title, content=content) for cid, title, content in chapters],
    )


@pytest.fixture
def book():
    return make_book(
        ("c1", "One", "First chapter text."),
        ("c2", "Two", "Second chapter text."),
    )


@pytest.fixture
def store(book):
    return ManuscriptStore(book)


@pytest.fixture
def ledger(store):
    return RevisionLedger(store)


@pytest.fixture
def template():
    return template_book()


@pytest.fixture
def loop():
    return ManualLoop()


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def assistant():
    return FakeAssistant()


@pytest.fixture
def failing_assistant():
    return FakeAssistant(fail=True)
