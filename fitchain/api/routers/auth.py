"""Wallet sign-in routes: nonce issue and SIWE completion."""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from ...core import COOKIE_SECURE, NONCE_COOKIE_NAME, NONCE_MAX_AGE
from ...services.siwe import SiweError, verify_siwe_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _siwe_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        {"status": "error", "isValid": False, "message": message},
        status_code=status_code,
    )


@router.get("/nonce")
def issue_nonce(response: Response) -> Dict[str, str]:
    """Issue a single-use nonce and pin it to the client in a cookie."""

    nonce = secrets.token_hex(16)
    response.set_cookie(
        NONCE_COOKIE_NAME,
        nonce,
        max_age=NONCE_MAX_AGE,
        path="/",
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="strict",
    )
    return {"nonce": nonce}


@router.post("/complete-siwe")
def complete_siwe(body: Dict[str, Any], request: Request):
    """Verify a signed wallet-auth payload against the issued nonce."""

    payload = body.get("payload")
    nonce = body.get("nonce")
    stored_nonce = request.cookies.get(NONCE_COOKIE_NAME)

    if not nonce or not stored_nonce or nonce != stored_nonce:
        return _siwe_error("Invalid nonce", 400)

    try:
        verify_siwe_message(payload if isinstance(payload, dict) else {}, nonce)
    except SiweError as exc:
        logger.info("SIWE verification rejected: %s", exc)
        response = _siwe_error("Invalid signature", 400)
    except Exception as exc:
        logger.exception("SIWE verification error")
        response = _siwe_error(str(exc) or "Verification failed", 500)
    else:
        # The address stays client-side; the host app supplies the username.
        response = JSONResponse({"status": "success", "isValid": True})

    response.delete_cookie(
        NONCE_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="strict",
    )
    return response


__all__ = ["router"]
