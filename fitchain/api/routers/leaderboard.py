"""Leaderboard endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core import get_session
from ...services.users import get_leaderboard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["leaderboard"])

MAX_LEADERBOARD_LIMIT = 500


@router.get("/leaderboard-db")
def read_leaderboard(
    limit: int = Query(100, ge=1, le=MAX_LEADERBOARD_LIMIT),
    session: Session = Depends(get_session),
):
    """Global leaderboard ranked by total XP."""

    try:
        leaderboard = get_leaderboard(session, limit)
    except SQLAlchemyError as exc:
        logger.exception("Failed to read leaderboard")
        raise HTTPException(500, "Failed to get leaderboard") from exc

    return {"success": True, "leaderboard": leaderboard, "count": len(leaderboard)}


__all__ = ["router"]
