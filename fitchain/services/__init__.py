"""Service layer helpers."""

from .payments import (
    TransactionLookupError,
    fetch_transaction,
    new_payment_reference,
    transaction_failed,
)
from .siwe import SiweError, verify_siwe_message
from .users import (
    food_entry_to_dict,
    get_leaderboard,
    get_user,
    get_user_stats,
    list_food_entries,
    log_food_entry,
    upsert_user,
    user_to_dict,
)
from .world_id import (
    ACTION_CONFIGS,
    normalize_app_id,
    verify_cloud_proof,
)

__all__ = [
    "ACTION_CONFIGS",
    "SiweError",
    "TransactionLookupError",
    "fetch_transaction",
    "food_entry_to_dict",
    "get_leaderboard",
    "get_user",
    "get_user_stats",
    "list_food_entries",
    "log_food_entry",
    "new_payment_reference",
    "normalize_app_id",
    "transaction_failed",
    "upsert_user",
    "user_to_dict",
    "verify_cloud_proof",
]
