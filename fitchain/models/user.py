"""Database model for tracker users."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

USERNAME_MAX_LENGTH = 100


class User(SQLModel, table=True):
    """Super-app user identified by username, with gamification totals."""

    __tablename__ = "users"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    username: str = ORMField(
        index=True, unique=True, max_length=USERNAME_MAX_LENGTH
    )
    total_xp: int = 0
    total_calories: int = 0
    level: int = 1
    streak: int = 1
    joined_at: datetime = ORMField(default_factory=utcnow)
    last_active: datetime = ORMField(default_factory=utcnow)
    last_streak_update: datetime = ORMField(default_factory=utcnow)


__all__ = ["USERNAME_MAX_LENGTH", "User"]
