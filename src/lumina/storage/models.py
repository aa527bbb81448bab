"""On-disk record formats."""

from datetime import datetime

from pydantic import BaseModel, Field

from lumina.models.manuscript import Book
from lumina.models.session import UserProfile


class StoredBook(BaseModel):
    """The active book slot."""

    store_version: str = "1.0"
    written_at: datetime = Field(default_factory=datetime.now)
    book: Book


class StoredUser(BaseModel):
    """The signed-in user slot."""

    store_version: str = "1.0"
    user: UserProfile
