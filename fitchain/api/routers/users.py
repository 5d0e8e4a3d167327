"""User sync and stats endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ...core import get_session
from ...models import USERNAME_MAX_LENGTH
from ...services.users import (
    count_entries,
    get_user,
    get_user_stats,
    upsert_user,
    user_to_dict,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["users"])


def normalize_username(username: Any) -> str:
    """Normalize inbound usernames to match storage rules."""

    normalized = username.strip() if isinstance(username, str) else ""
    if not normalized:
        raise HTTPException(400, "Username is required")
    if len(normalized) > USERNAME_MAX_LENGTH:
        raise HTTPException(
            400, f"Username must be {USERNAME_MAX_LENGTH} characters or less"
        )
    return normalized


def _sync_user(session: Session, username: str) -> Dict[str, Any]:
    try:
        user = upsert_user(session, username)
        total_entries = count_entries(session, user.username)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to sync user %s", username)
        raise HTTPException(500, "Failed to sync user") from exc

    return {"success": True, "user": user_to_dict(user, total_entries)}


@router.post("/sync")
def sync_user(body: Dict[str, Any], session: Session = Depends(get_session)):
    """Create or refresh the user after the host app signs them in."""

    return _sync_user(session, normalize_username(body.get("username")))


@router.get("/sync")
def get_synced_user(
    username: Optional[str] = None, session: Session = Depends(get_session)
):
    """Same upsert as POST, for clients that only have the username at hand."""

    return _sync_user(session, normalize_username(username))


@router.get("/stats")
def user_stats(
    username: Optional[str] = None, session: Session = Depends(get_session)
):
    """Totals plus rank and level progress for one user."""

    user = get_user(session, normalize_username(username))
    if not user:
        raise HTTPException(404, "User not found")
    return {"success": True, "stats": get_user_stats(session, user)}


__all__ = ["normalize_username", "router"]
