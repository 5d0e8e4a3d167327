"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from ...core import APP_ENV, WLD_ACTION, WLD_APP_ID, WLD_SIGNAL
from ...services.world_id import normalize_app_id

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness check."""

    return {"ok": True}


@router.get("/config")
def get_config() -> Dict[str, Any]:
    """Expose client configuration values."""

    return {
        "app_id": normalize_app_id(WLD_APP_ID) if WLD_APP_ID else None,
        "action": WLD_ACTION,
        "signal": WLD_SIGNAL,
        "environment": APP_ENV,
    }


__all__ = ["router"]
