"""Debounced persistence of the manuscript."""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Protocol

from lumina.core.store import ManuscriptStore
from lumina.models.manuscript import Book

log = logging.getLogger(__name__)


class SaveStatus(str, Enum):
    """Visible persistence state."""

    IDLE = "idle"
    PENDING = "pending"
    WRITING = "writing"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class EventLoop(Protocol):
    """The part of ``asyncio.AbstractEventLoop`` the scheduler relies on."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...

    def time(self) -> float: ...


class BookWriter(Protocol):
    def save_book(self, book: Book) -> None: ...


StatusListener = Callable[[SaveStatus], None]


class PersistenceScheduler:
    """Collapse bursts of edits into one durable write.

    Every store change cancels the pending timer and starts a new one, so
    only the state after the last edit of a burst is written. After a write
    the status stays WRITING for ``min_visible`` seconds before returning to
    IDLE. A failed write is logged and the scheduler goes back to IDLE; the
    next edit re-arms it.
    """

    DEBOUNCE_SECONDS = 2.0
    MIN_VISIBLE_SECONDS = 0.8

    def __init__(
        self,
        store: ManuscriptStore,
        writer: BookWriter,
        loop: EventLoop,
        debounce: float = DEBOUNCE_SECONDS,
        min_visible: float = MIN_VISIBLE_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.writer = writer
        self.loop = loop
        self.debounce = debounce
        self.min_visible = min_visible
        self.clock = clock

        self.status = SaveStatus.IDLE
        self.write_count = 0
        self.last_error: Exception | None = None
        self._timer: TimerHandle | None = None
        self._settle: TimerHandle | None = None
        self._listeners: list[StatusListener] = []
        self._unsubscribe: Callable[[], None] | None = None

    def start(self) -> None:
        """Begin watching the store for changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_change)

    def stop(self) -> None:
        """Stop watching and drop any pending write."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._cancel_timers()
        self._set_status(SaveStatus.IDLE)

    def on_status(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    @property
    def is_pending(self) -> bool:
        return self._timer is not None

    def _set_status(self, status: SaveStatus) -> None:
        if status == self.status:
            return
        self.status = status
        for listener in list(self._listeners):
            listener(status)

    def _cancel_timers(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._settle is not None:
            self._settle.cancel()
            self._settle = None

    def _on_change(self, book: Book) -> None:
        self._cancel_timers()
        self._timer = self.loop.call_later(self.debounce, self._fire)
        self._set_status(SaveStatus.PENDING)

    def _fire(self) -> None:
        self._timer = None
        self._set_status(SaveStatus.WRITING)

        saved_at = self.clock()
        snapshot = self.store.book.model_copy(deep=True, update={"last_saved": saved_at})
        try:
            self.writer.save_book(snapshot)
        except Exception as e:
            self.last_error = e
            log.exception("Saving book %s failed", snapshot.id)
            self._set_status(SaveStatus.IDLE)
            return

        self.last_error = None
        self.write_count += 1
        self.store.mark_saved(saved_at)
        log.debug("Saved book %s at %s", snapshot.id, saved_at.isoformat())

        if self.min_visible > 0:
            self._settle = self.loop.call_later(self.min_visible, self._settled)
        else:
            self._set_status(SaveStatus.IDLE)

    def _settled(self) -> None:
        self._settle = None
        self._set_status(SaveStatus.IDLE)
