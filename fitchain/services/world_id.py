"""World ID cloud proof verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from web3 import Web3

from ..core.config import DEV_PORTAL_BASE_URL, HTTP_TIMEOUT

logger = logging.getLogger(__name__)

USER_AGENT = "fitchain-api"


class WorldAction(str, Enum):
    """Incognito actions registered for the app in the Developer Portal."""

    VERIFY_HUMAN = "verify-human"
    DAILY_FOOD_LOG = "daily-food-log"
    CLAIM_DAILY_REWARD = "claim-daily-reward"
    VOTE_BEST_FOOD = "vote-best-food"
    JOIN_CHALLENGE = "join-challenge"
    REPORT_CONTENT = "report-content"
    CLAIM_REFERRAL_BONUS = "claim-referral-bonus"


@dataclass(frozen=True)
class ActionConfig:
    name: str
    description: str
    max_verifications: int


ACTION_CONFIGS: Dict[WorldAction, ActionConfig] = {
    WorldAction.VERIFY_HUMAN: ActionConfig(
        "verify-human", "Verify user is a unique human", 1
    ),
    WorldAction.DAILY_FOOD_LOG: ActionConfig(
        "daily-food-log", "Log food entry (max 3 per day)", 3
    ),
    WorldAction.CLAIM_DAILY_REWARD: ActionConfig(
        "claim-daily-reward", "Claim daily XP bonus (once per day)", 1
    ),
    WorldAction.VOTE_BEST_FOOD: ActionConfig(
        "vote-best-food", "Vote on community food entries", 1
    ),
    WorldAction.JOIN_CHALLENGE: ActionConfig(
        "join-challenge", "Join a fitness challenge", 1
    ),
    WorldAction.REPORT_CONTENT: ActionConfig(
        "report-content", "Report inappropriate content (max 5 per day)", 5
    ),
    WorldAction.CLAIM_REFERRAL_BONUS: ActionConfig(
        "claim-referral-bonus", "Claim bonus for referring friends", 1
    ),
}


def is_known_action(action: str) -> bool:
    return action in {item.value for item in WorldAction}


@dataclass
class VerifyResult:
    """Outcome of a cloud verification call."""

    success: bool
    code: Optional[str] = None
    detail: Optional[str] = None
    attribute: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if not self.success:
            data.update(
                {"code": self.code, "detail": self.detail, "attribute": self.attribute}
            )
        return data


def normalize_app_id(app_id: str) -> str:
    app_id = app_id.strip()
    return app_id if app_id.startswith("app_") else f"app_{app_id}"


def _is_hex_bytes(value: str) -> bool:
    if not value.startswith("0x") or len(value) % 2:
        return False
    try:
        bytes.fromhex(value[2:])
    except ValueError:
        return False
    return True


def hash_to_field(value: str | bytes) -> str:
    """Hash a signal into the World ID field: keccak256 shifted right by 8 bits.

    Hex strings (``0x...``) are hashed as raw bytes, other strings as UTF-8.
    """

    if isinstance(value, bytes):
        raw = value
    elif _is_hex_bytes(value):
        raw = bytes.fromhex(value[2:])
    else:
        raw = value.encode("utf-8")
    digest = int.from_bytes(Web3.keccak(primitive=raw), "big") >> 8
    return "0x" + format(digest, "064x")


async def verify_cloud_proof(
    proof: Dict[str, Any],
    app_id: str,
    action: str,
    signal: str = "",
    *,
    base_url: str = DEV_PORTAL_BASE_URL,
) -> VerifyResult:
    """Verify a World ID proof with the Developer Portal.

    Raises ``httpx.HTTPError`` when the portal cannot be reached.
    """

    if not is_known_action(action):
        logger.warning("Verifying proof for unregistered action %r", action)

    body = {
        "nullifier_hash": proof.get("nullifier_hash"),
        "merkle_root": proof.get("merkle_root"),
        "proof": proof.get("proof"),
        "verification_level": proof.get("verification_level"),
        "action": action,
        "signal_hash": hash_to_field(signal or ""),
    }

    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        response = await client.post(
            f"{base_url}/api/v2/verify/{app_id}",
            json=body,
            headers={"User-Agent": USER_AGENT},
        )

    if response.status_code == 200:
        return VerifyResult(success=True)

    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    logger.info(
        "World ID verification rejected (status=%s code=%s)",
        response.status_code,
        data.get("code"),
    )
    return VerifyResult(
        success=False,
        code=data.get("code"),
        detail=data.get("detail"),
        attribute=data.get("attribute"),
    )


__all__ = [
    "ACTION_CONFIGS",
    "ActionConfig",
    "VerifyResult",
    "WorldAction",
    "hash_to_field",
    "is_known_action",
    "normalize_app_id",
    "verify_cloud_proof",
]
