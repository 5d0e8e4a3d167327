"""User, leaderboard and food log helpers."""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from ..core.time import isoformat_z, utcnow
from ..models import FoodEntry, User

logger = logging.getLogger(__name__)

STREAK_KEEP_WINDOW = timedelta(hours=24)
STREAK_BREAK_WINDOW = timedelta(hours=48)


def calculate_level(xp: int) -> int:
    """Level curve: level N starts at (N-1)^2 * 100 XP."""

    return int(math.floor(math.sqrt(max(xp, 0) / 100))) + 1


def xp_for_level(level: int) -> int:
    return level**2 * 100


def advance_streak(user: User, now: datetime) -> int:
    """Return the streak value after activity at ``now``.

    Activity inside 24 hours of the last streak update keeps the streak,
    24 to 48 hours extends it, anything older starts over at 1.
    """

    elapsed = now - (user.last_streak_update or user.last_active)
    if elapsed >= STREAK_BREAK_WINDOW:
        return 1
    if elapsed >= STREAK_KEEP_WINDOW:
        return user.streak + 1
    return user.streak


def get_user(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def count_entries(session: Session, username: str) -> int:
    return session.exec(
        select(func.count(FoodEntry.id)).where(FoodEntry.username == username)
    ).one()


def upsert_user(session: Session, username: str) -> User:
    """Create the user on first sight, otherwise just mark them active."""

    user = get_user(session, username)
    if user:
        user.last_active = utcnow()
    else:
        user = User(username=username)
        logger.info("Creating user %s", username)
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # Lost a race with a concurrent sync for the same username.
        session.rollback()
        user = get_user(session, username)
        if user is None:
            raise
        return user
    session.refresh(user)
    return user


def user_to_dict(user: User, total_entries: int) -> Dict[str, Any]:
    """Serialise a user to the client-facing projection."""

    return {
        "id": user.id,
        "username": user.username,
        "totalXP": user.total_xp,
        "level": user.level,
        "streak": user.streak,
        "totalCalories": user.total_calories,
        "totalEntries": total_entries,
    }


def get_user_rank(session: Session, user: User) -> int:
    ahead = session.exec(
        select(func.count(User.id)).where(User.total_xp > user.total_xp)
    ).one()
    return ahead + 1


def get_user_stats(session: Session, user: User) -> Dict[str, Any]:
    stats = user_to_dict(user, count_entries(session, user.username))
    stats.update(
        {
            "rank": get_user_rank(session, user),
            "xpForNextLevel": xp_for_level(user.level + 1),
            "xpProgress": user.total_xp % xp_for_level(user.level),
            "joinedAt": isoformat_z(user.joined_at),
            "lastActive": isoformat_z(user.last_active),
        }
    )
    return stats


def get_leaderboard(session: Session, limit: int) -> List[Dict[str, Any]]:
    """Top users by XP, ranked from 1."""

    entry_count = func.count(FoodEntry.id)
    rows = session.exec(
        select(User, entry_count)
        .join(FoodEntry, FoodEntry.user_id == User.id, isouter=True)
        .group_by(User.id)
        .order_by(User.total_xp.desc(), User.joined_at.asc(), User.id.asc())
        .limit(limit)
    ).all()

    return [
        {
            "rank": index,
            "username": user.username,
            "totalXP": user.total_xp,
            "level": user.level,
            "totalCalories": user.total_calories,
            "streak": user.streak,
            "joinedAt": isoformat_z(user.joined_at),
            "totalEntries": entries,
        }
        for index, (user, entries) in enumerate(rows, start=1)
    ]


def _dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value)


def _load_json(raw: Optional[str]) -> Any:
    if not raw:
        return None
    return json.loads(raw)


def log_food_entry(
    session: Session,
    user: User,
    *,
    food_name: str,
    calories: int,
    xp_earned: int = 0,
    image_url: str = "",
    thumbnail_url: Optional[str] = None,
    confidence: Optional[str] = None,
    cuisine: Optional[str] = None,
    portion_size: Optional[str] = None,
    cooking_method: Optional[str] = None,
    health_score: Optional[str] = None,
    alternatives: Optional[str] = None,
    meal_type: Optional[str] = None,
    ingredients: Optional[List[str]] = None,
    nutrients: Optional[Dict[str, Any]] = None,
    allergens: Optional[List[str]] = None,
) -> FoodEntry:
    """Store a food entry and roll its calories and XP into the user."""

    now = utcnow()
    entry = FoodEntry(
        user_id=user.id,
        username=user.username,
        food_name=food_name,
        calories=calories,
        xp_earned=xp_earned,
        image_url=image_url,
        thumbnail_url=thumbnail_url,
        confidence=confidence,
        cuisine=cuisine,
        portion_size=portion_size,
        cooking_method=cooking_method,
        health_score=health_score,
        alternatives=alternatives,
        meal_type=meal_type,
        ingredients_json=_dump_json(ingredients),
        nutrients_json=_dump_json(nutrients),
        allergens_json=_dump_json(allergens),
        created_at=now,
    )

    user.total_calories += calories
    user.total_xp += xp_earned
    user.level = max(user.level, calculate_level(user.total_xp))
    user.streak = advance_streak(user, now)
    user.last_streak_update = now
    user.last_active = now

    session.add(entry)
    session.add(user)
    session.commit()
    session.refresh(entry)
    session.refresh(user)
    return entry


def list_food_entries(
    session: Session, username: str, *, limit: int = 50, offset: int = 0
) -> List[FoodEntry]:
    return list(
        session.exec(
            select(FoodEntry)
            .where(FoodEntry.username == username)
            .order_by(FoodEntry.created_at.desc(), FoodEntry.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
    )


def food_entry_to_dict(entry: FoodEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "foodName": entry.food_name,
        "calories": entry.calories,
        "xpEarned": entry.xp_earned,
        "imageUrl": entry.image_url,
        "thumbnailUrl": entry.thumbnail_url,
        "cuisine": entry.cuisine,
        "mealType": entry.meal_type,
        "ingredients": _load_json(entry.ingredients_json) or [],
        "nutrients": _load_json(entry.nutrients_json),
        "allergens": _load_json(entry.allergens_json) or [],
        "createdAt": isoformat_z(entry.created_at),
    }


__all__ = [
    "advance_streak",
    "calculate_level",
    "count_entries",
    "food_entry_to_dict",
    "get_leaderboard",
    "get_user",
    "get_user_rank",
    "get_user_stats",
    "list_food_entries",
    "log_food_entry",
    "upsert_user",
    "user_to_dict",
    "xp_for_level",
]
