"""Database model for logged food entries."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class FoodEntry(SQLModel, table=True):
    """A single logged meal with its analysis results."""

    __tablename__ = "food_entries"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    user_id: int = ORMField(foreign_key="users.id", index=True)
    username: str = ORMField(index=True)
    food_name: str
    calories: int
    xp_earned: int = 0
    image_url: str = ""
    thumbnail_url: Optional[str] = None
    confidence: Optional[str] = None
    cuisine: Optional[str] = None
    portion_size: Optional[str] = None
    cooking_method: Optional[str] = None
    health_score: Optional[str] = None
    alternatives: Optional[str] = None
    meal_type: Optional[str] = None
    ingredients_json: Optional[str] = None
    nutrients_json: Optional[str] = None
    allergens_json: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["FoodEntry"]
