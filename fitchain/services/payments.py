"""MiniKit payment lookups against the Developer Portal."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict
from urllib.parse import quote

import httpx

from ..core.config import DEV_PORTAL_BASE_URL, HTTP_TIMEOUT

logger = logging.getLogger(__name__)

FAILED_STATUS = "failed"


class TransactionLookupError(Exception):
    """The portal answered, but not with a transaction."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Transaction lookup returned HTTP {status_code}")
        self.status_code = status_code


class InvalidTransactionResponse(Exception):
    """The portal answered 2xx with something other than a JSON object."""


def new_payment_reference() -> str:
    return uuid.uuid4().hex


async def fetch_transaction(
    transaction_id: str,
    *,
    app_id: str,
    api_key: str,
    base_url: str = DEV_PORTAL_BASE_URL,
) -> Dict[str, Any]:
    """Fetch a MiniKit transaction by id.

    Raises ``TransactionLookupError`` on a non-2xx answer,
    ``InvalidTransactionResponse`` when a 2xx body is not a JSON object and
    ``httpx.HTTPError`` when the portal cannot be reached.
    """

    # The id is client-supplied; keep it a single path segment.
    path = f"/api/v2/minikit/transaction/{quote(transaction_id, safe='')}"
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        response = await client.get(
            f"{base_url}{path}",
            params={"app_id": app_id},
            headers={"Authorization": f"Bearer {api_key}"},
        )

    if not response.is_success:
        logger.info(
            "Transaction %s lookup failed with HTTP %s",
            transaction_id,
            response.status_code,
        )
        raise TransactionLookupError(response.status_code)

    try:
        transaction = response.json()
    except ValueError as exc:
        raise InvalidTransactionResponse(
            "Transaction lookup returned a non-JSON body"
        ) from exc
    if not isinstance(transaction, dict):
        raise InvalidTransactionResponse("Transaction lookup returned non-object JSON")
    return transaction


def transaction_failed(transaction: Dict[str, Any]) -> bool:
    return transaction.get("status") == FAILED_STATUS


__all__ = [
    "FAILED_STATUS",
    "InvalidTransactionResponse",
    "TransactionLookupError",
    "fetch_transaction",
    "new_payment_reference",
    "transaction_failed",
]
