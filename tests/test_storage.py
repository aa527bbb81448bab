"""Tests for file-backed session storage."""

import json

from lumina.models.manuscript import template_book
from lumina.models.session import UserProfile
from lumina.storage.manager import SessionStorage


class TestBookSlot:
    """Saving and loading the active book."""

    def test_missing_file_gives_template(self, tmp_path):
        storage = SessionStorage(tmp_path / "data")

        book = storage.load_book()

        assert not storage.has_book()
        assert book.id == "1"
        assert book.chapters[0].id == "c1"
        assert book.metadata.title == "New Book Project"

    def test_save_then_load(self, tmp_path, book, ledger):
        ledger.snapshot("c1", "Manual save")
        storage = SessionStorage(tmp_path)

        storage.save_book(book)
        loaded = storage.load_book()

        assert loaded == book
        assert storage.has_book()
        assert not (tmp_path / "active_book.json.tmp").exists()

    def test_record_is_versioned(self, tmp_path, book):
        storage = SessionStorage(tmp_path)
        storage.save_book(book)

        record = json.loads((tmp_path / "active_book.json").read_text())

        assert record["store_version"] == "1.0"
        assert record["book"]["id"] == "b1"

    def test_corrupt_file_gives_template(self, tmp_path):
        (tmp_path / "active_book.json").write_text("{not json")

        book = SessionStorage(tmp_path).load_book()

        assert book.metadata.title == template_book().metadata.title

    def test_invalid_record_gives_template(self, tmp_path):
        (tmp_path / "active_book.json").write_text(
            json.dumps({"store_version": "1.0", "book": {"id": "x", "chapters": []}})
        )

        assert SessionStorage(tmp_path).load_book().id == "1"

    def test_other_version_gives_template(self, tmp_path, book):
        storage = SessionStorage(tmp_path)
        storage.save_book(book)
        record = json.loads(storage.book_path.read_text())
        record["store_version"] = "0.9"
        storage.book_path.write_text(json.dumps(record))

        assert storage.load_book().id == "1"


class TestUserSlot:
    """Saving and clearing the user profile."""

    def test_no_user(self, tmp_path):
        assert SessionStorage(tmp_path).load_user() is None

    def test_save_load_clear(self, tmp_path):
        storage = SessionStorage(tmp_path)
        user = UserProfile.local(name="Ada", email="ada@example.com", plan="studio")

        storage.save_user(user)
        assert storage.load_user() == user

        assert storage.clear_user()
        assert storage.load_user() is None
        assert not storage.clear_user()

    def test_corrupt_user_ignored(self, tmp_path):
        (tmp_path / "user.json").write_text("[]")
        assert SessionStorage(tmp_path).load_user() is None
