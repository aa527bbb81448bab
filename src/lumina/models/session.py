"""User profile stored alongside the active book."""

from datetime import datetime, timedelta
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

PlanType = Literal["free", "pro", "studio"]

TRIAL_DAYS = 14


class UserProfile(BaseModel):
    """Signed-in author profile."""

    id: str = Field(default_factory=lambda: uuid4().hex[:9])
    email: str
    name: str
    plan: PlanType = "free"
    trial_ends_at: datetime | None = None
    is_logged_in: bool = True

    @classmethod
    def local(cls, name: str = "", email: str = "", plan: PlanType = "pro") -> "UserProfile":
        """Create a local profile; paid plans start a 14-day trial."""
        trial = None if plan == "free" else datetime.now() + timedelta(days=TRIAL_DAYS)
        return cls(
            email=email or "author@example.com",
            name=name or "Author Name",
            plan=plan,
            trial_ends_at=trial,
        )
