"""MiniKit payment endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ...core import DEV_PORTAL_API_KEY, WLD_APP_ID
from ...services.payments import (
    InvalidTransactionResponse,
    TransactionLookupError,
    fetch_transaction,
    new_payment_reference,
    transaction_failed,
)
from ...services.world_id import normalize_app_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["payments"])


def _payment_error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


@router.post("/initiate-payment")
def initiate_payment(body: Dict[str, Any]) -> Dict[str, Any]:
    """Hand out a payment reference for the client to pay against."""

    # TODO: store the reference so confirm-payment can match it.
    return {
        "id": new_payment_reference(),
        "amount": body.get("amount"),
        "description": body.get("description"),
    }


@router.post("/confirm-payment")
async def confirm_payment(body: Dict[str, Any]):
    """Check a MiniKit transaction with the Developer Portal."""

    payload = body.get("payload")
    transaction_id = payload.get("transaction_id") if isinstance(payload, dict) else None
    if not transaction_id:
        return _payment_error("Missing transaction_id", 400)

    if not WLD_APP_ID or not DEV_PORTAL_API_KEY:
        logger.error("Payment confirmation requires WLD_APP_ID and DEV_PORTAL_API_KEY")
        return _payment_error("Payments not configured", 500)

    try:
        transaction = await fetch_transaction(
            str(transaction_id),
            app_id=normalize_app_id(WLD_APP_ID),
            api_key=DEV_PORTAL_API_KEY,
        )
    except TransactionLookupError:
        return _payment_error("Failed to verify transaction", 400)
    except InvalidTransactionResponse as exc:
        logger.error("Payment confirmation got an unusable portal reply: %s", exc)
        return _payment_error("Invalid transaction response", 500)
    except httpx.HTTPError as exc:
        logger.exception("Payment confirmation error")
        return _payment_error(str(exc) or "Failed to confirm payment", 500)

    if transaction_failed(transaction):
        return _payment_error("Transaction failed", 400)

    # TODO: mark the stored reference as paid once references are persisted.
    return {"success": True, "transaction": transaction}


__all__ = ["router"]
