"""World ID proof-of-personhood routes."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core import WLD_APP_ID
from ...services.world_id import ACTION_CONFIGS, normalize_app_id, verify_cloud_proof

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/world-id", tags=["world-id"])


@router.post("/verify")
async def verify_proof(body: Dict[str, Any]):
    """Relay an incognito-action proof to the World ID cloud verifier."""

    payload = body.get("payload")
    action = body.get("action")
    signal = body.get("signal")

    if not payload or not action or not isinstance(payload, dict):
        return JSONResponse(
            {"success": False, "message": "Missing required fields"},
            status_code=400,
        )

    if not WLD_APP_ID:
        logger.error("World ID app id is not configured")
        return JSONResponse(
            {"success": False, "message": "World ID not configured"},
            status_code=500,
        )

    app_id = normalize_app_id(WLD_APP_ID)
    try:
        result = await verify_cloud_proof(
            payload, app_id, str(action), "" if signal is None else str(signal)
        )
    except httpx.HTTPError as exc:
        logger.exception("World ID cloud verification failed")
        return JSONResponse(
            {"success": False, "message": str(exc) or "Verification failed"},
            status_code=500,
        )

    if result.success:
        return {
            "success": True,
            "verified": True,
            "nullifier_hash": payload.get("nullifier_hash"),
            "verifyRes": result.to_dict(),
        }

    return JSONResponse(
        {
            "success": False,
            "verified": False,
            "message": "Proof verification failed",
            "code": result.code,
            "detail": result.detail,
        },
        status_code=400,
    )


@router.get("/actions")
def list_actions() -> Dict[str, List[Dict[str, Any]]]:
    """Incognito actions and their per-human verification limits."""

    return {
        "actions": [
            {
                "action": action.value,
                "name": config.name,
                "description": config.description,
                "max_verifications": config.max_verifications,
            }
            for action, config in ACTION_CONFIGS.items()
        ]
    }


__all__ = ["router"]
