"""Sign-in with Ethereum (EIP-4361) message checks for wallet auth."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from ..core.config import HTTP_TIMEOUT, WORLDCHAIN_RPC_URL

logger = logging.getLogger(__name__)

PREAMBLE = " wants you to sign in with your Ethereum account:"

_TAGS = {
    "URI: ": "uri",
    "Version: ": "version",
    "Chain ID: ": "chain_id",
    "Nonce: ": "nonce",
    "Issued At: ": "issued_at",
    "Expiration Time: ": "expiration_time",
    "Not Before: ": "not_before",
    "Request ID: ": "request_id",
}

# Minimal Safe wallet ABI; host wallets are Safe contracts on World Chain.
SAFE_OWNER_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "owner", "type": "address"}],
        "name": "isOwner",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class SiweError(ValueError):
    """Raised when a SIWE message or its signature does not check out."""


@dataclass
class SiweMessage:
    domain: str
    address: str
    statement: Optional[str] = None
    uri: Optional[str] = None
    version: Optional[str] = None
    chain_id: Optional[str] = None
    nonce: Optional[str] = None
    issued_at: Optional[str] = None
    expiration_time: Optional[str] = None
    not_before: Optional[str] = None
    request_id: Optional[str] = None
    resources: List[str] = field(default_factory=list)


def parse_siwe_message(text: str) -> SiweMessage:
    """Parse the plain-text EIP-4361 message signed by the wallet."""

    lines = text.split("\n")
    if len(lines) < 2 or not lines[0].endswith(PREAMBLE):
        raise SiweError("Message is missing the sign-in preamble")

    message = SiweMessage(
        domain=lines[0][: -len(PREAMBLE)], address=lines[1].strip()
    )
    statement_lines: List[str] = []
    in_resources = False

    for line in lines[2:]:
        if in_resources:
            if line.startswith("- "):
                message.resources.append(line[2:])
            continue
        if line == "Resources:":
            in_resources = True
            continue
        for tag, attr in _TAGS.items():
            if line.startswith(tag):
                setattr(message, attr, line[len(tag):].strip())
                break
        else:
            if line.strip() and message.uri is None:
                statement_lines.append(line.strip())

    if statement_lines:
        message.statement = "\n".join(statement_lines)
    if not message.nonce:
        raise SiweError("Message has no nonce")
    return message


def _parse_timestamp(raw: str, label: str) -> datetime:
    try:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise SiweError(f"{label} is not a valid timestamp") from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def validate_message(
    message: SiweMessage,
    nonce: str,
    *,
    statement: Optional[str] = None,
    request_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    now = now or datetime.now(timezone.utc)

    if message.version != "1":
        raise SiweError(f"Unsupported message version {message.version}")
    if message.nonce != nonce:
        raise SiweError("Nonce mismatch")
    if message.expiration_time and now > _parse_timestamp(
        message.expiration_time, "Expiration Time"
    ):
        raise SiweError("Message has expired")
    if message.not_before and now < _parse_timestamp(
        message.not_before, "Not Before"
    ):
        raise SiweError("Message is not yet valid")
    if statement is not None and message.statement != statement:
        raise SiweError("Statement mismatch")
    if request_id is not None and message.request_id != request_id:
        raise SiweError("Request ID mismatch")


def recover_signer(text: str, signature: str) -> str:
    """Recover the EIP-191 personal-sign address for ``text``."""

    try:
        return Account.recover_message(encode_defunct(text=text), signature=signature)
    except Exception as exc:
        raise SiweError("Signature could not be recovered") from exc


def is_safe_owner(
    wallet: str, signer: str, *, rpc_url: str = WORLDCHAIN_RPC_URL
) -> bool:
    """Ask the wallet contract whether ``signer`` is one of its owners.

    RPC transport failures propagate to the caller.
    """

    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": HTTP_TIMEOUT}))
    contract = w3.eth.contract(address=wallet, abi=SAFE_OWNER_ABI)
    try:
        return bool(contract.functions.isOwner(signer).call())
    except (BadFunctionCallOutput, ContractLogicError) as exc:
        logger.info("isOwner call failed for %s: %s", wallet, exc)
        return False


def verify_siwe_message(
    payload: Dict[str, Any],
    nonce: str,
    *,
    statement: Optional[str] = None,
    request_id: Optional[str] = None,
    rpc_url: str = WORLDCHAIN_RPC_URL,
) -> SiweMessage:
    """Check a wallet-auth payload against the issued nonce.

    Returns the parsed message; raises ``SiweError`` when invalid.
    """

    text = payload.get("message")
    signature = payload.get("signature")
    address = payload.get("address")
    if not isinstance(text, str) or not isinstance(signature, str) or not address:
        raise SiweError("Payload is missing message, signature or address")

    message = parse_siwe_message(text)
    validate_message(message, nonce, statement=statement, request_id=request_id)

    try:
        wallet = Web3.to_checksum_address(address)
    except (TypeError, ValueError) as exc:
        raise SiweError("Payload address is not a valid address") from exc
    if message.address.lower() != wallet.lower():
        raise SiweError("Message was issued for a different address")

    signer = recover_signer(text, signature)
    if signer == wallet:
        return message
    if is_safe_owner(wallet, signer, rpc_url=rpc_url):
        return message
    raise SiweError("Signer does not control the wallet")


__all__ = [
    "SiweError",
    "SiweMessage",
    "is_safe_owner",
    "parse_siwe_message",
    "recover_signer",
    "validate_message",
    "verify_siwe_message",
]
