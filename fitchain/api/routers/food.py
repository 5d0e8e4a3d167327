"""Food log endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core import get_session
from ...services.users import (
    food_entry_to_dict,
    get_user,
    list_food_entries,
    log_food_entry,
)
from .users import normalize_username

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/food", tags=["food"])


def _as_int(value: Any, field: str, *, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise HTTPException(400, f"{field} must be a number") from None
    if number < minimum:
        raise HTTPException(400, f"{field} must be at least {minimum}")
    return number


@router.post("/log")
def create_food_log(body: Dict[str, Any], session: Session = Depends(get_session)):
    """Save a food entry and credit its calories and XP to the user."""

    food_name = (body.get("foodName") or "").strip()
    if not body.get("username") or not food_name or not body.get("calories"):
        raise HTTPException(
            400, "Missing required fields: username, foodName, calories"
        )

    username = normalize_username(body.get("username"))
    calories = _as_int(body.get("calories"), "calories", minimum=1)
    xp_earned = _as_int(body.get("xpEarned") or 0, "xpEarned", minimum=0)

    user = get_user(session, username)
    if not user:
        raise HTTPException(404, "User not found")

    try:
        entry = log_food_entry(
            session,
            user,
            food_name=food_name,
            calories=calories,
            xp_earned=xp_earned,
            image_url=body.get("imageUrl") or "",
            thumbnail_url=body.get("thumbnailUrl"),
            confidence=body.get("confidence"),
            cuisine=body.get("cuisine"),
            portion_size=body.get("portionSize"),
            cooking_method=body.get("cookingMethod"),
            health_score=body.get("healthScore"),
            alternatives=body.get("alternatives"),
            meal_type=body.get("mealType"),
            ingredients=body.get("ingredients"),
            nutrients=body.get("nutrients"),
            allergens=body.get("allergens"),
        )
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to log food for %s", username)
        raise HTTPException(500, "Failed to log food") from exc

    return {
        "success": True,
        "entry": food_entry_to_dict(entry),
        "user": {
            "totalXP": user.total_xp,
            "level": user.level,
            "streak": user.streak,
            "totalCalories": user.total_calories,
        },
    }


@router.get("/log")
def read_food_log(
    username: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session),
):
    """Most recent food entries for a user."""

    entries = list_food_entries(
        session, normalize_username(username), limit=limit, offset=offset
    )
    return {
        "success": True,
        "entries": [food_entry_to_dict(entry) for entry in entries],
        "count": len(entries),
    }


__all__ = ["router"]
