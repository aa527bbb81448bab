"""File-backed storage for the active book and the user profile."""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from lumina.models.manuscript import Book, template_book
from lumina.models.session import UserProfile
from lumina.storage.models import StoredBook, StoredUser

log = logging.getLogger(__name__)


class SessionStorage:
    """Stores whole records in fixed slots under a data directory.

    The book and the user are opaque records: they are always loaded and
    stored whole.
    """

    SLOT_BOOK = "active_book.json"
    SLOT_USER = "user.json"
    STORE_VERSION = "1.0"

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir
        self.book_path = data_dir / self.SLOT_BOOK
        self.user_path = data_dir / self.SLOT_USER

    def _ensure_data_dir(self) -> None:
        """Create the data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _write_atomic(self, path: Path, text: str) -> None:
        """Write through a temp file so a crash never leaves half a record."""
        self._ensure_data_dir()
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)

    # ------------------------------------------------------------------
    # Book slot
    # ------------------------------------------------------------------

    def has_book(self) -> bool:
        return self.book_path.exists()

    def load_book(self) -> Book:
        """Load the saved book, or the template if there is none.

        A corrupt or incompatible record is logged and replaced by the
        template; it never stops the session from starting.
        """
        if not self.book_path.exists():
            return template_book()

        try:
            stored = StoredBook.model_validate_json(self.book_path.read_text(encoding="utf-8"))
        except (OSError, ValidationError, ValueError) as e:
            log.warning("Could not load %s, starting from template: %s", self.book_path, e)
            return template_book()

        if stored.store_version != self.STORE_VERSION:
            log.warning(
                "Stored book has version %s (expected %s), starting from template",
                stored.store_version,
                self.STORE_VERSION,
            )
            return template_book()

        return stored.book

    def save_book(self, book: Book) -> None:
        record = StoredBook(store_version=self.STORE_VERSION, book=book)
        self._write_atomic(self.book_path, record.model_dump_json(indent=2))

    # ------------------------------------------------------------------
    # User slot
    # ------------------------------------------------------------------

    def load_user(self) -> UserProfile | None:
        if not self.user_path.exists():
            return None
        try:
            stored = StoredUser.model_validate_json(self.user_path.read_text(encoding="utf-8"))
        except (OSError, ValidationError, ValueError) as e:
            log.warning("Could not load %s: %s", self.user_path, e)
            return None
        return stored.user

    def save_user(self, user: UserProfile) -> None:
        record = StoredUser(store_version=self.STORE_VERSION, user=user)
        self._write_atomic(self.user_path, record.model_dump_json(indent=2))

    def clear_user(self) -> bool:
        """Remove the user record. Returns True if one existed."""
        if not self.user_path.exists():
            return False
        self.user_path.unlink()
        return True
