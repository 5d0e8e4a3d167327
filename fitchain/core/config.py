"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

from dotenv import load_dotenv

load_dotenv(override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


# World ID / Developer Portal -------------------------------------------------
WLD_APP_ID = _first_env("WLD_APP_ID", "APP_ID")
WLD_ACTION = os.getenv("WLD_ACTION", "verify-human")
WLD_SIGNAL = os.getenv("WLD_SIGNAL", "")

DEV_PORTAL_API_KEY = os.getenv("DEV_PORTAL_API_KEY") or None
DEV_PORTAL_BASE_URL = os.getenv(
    "DEV_PORTAL_BASE_URL", "https://developer.worldcoin.org"
).rstrip("/")

WORLDCHAIN_RPC_URL = os.getenv(
    "WORLDCHAIN_RPC_URL", "https://worldchain-mainnet.g.alchemy.com/public"
)

HTTP_TIMEOUT = _env_float("HTTP_TIMEOUT", 20.0)


# Runtime behaviour ----------------------------------------------------------
APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
IS_PRODUCTION = APP_ENV == "production"

NONCE_COOKIE_NAME = "siwe"
NONCE_MAX_AGE = 60 * 10
COOKIE_SECURE = IS_PRODUCTION

# FRONTEND_ORIGIN can contain a comma-separated list for multi-domain deploys.
_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = (
    []
    if IS_PRODUCTION
    else [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
)

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATABASE_URL = f"sqlite:///{_PROJECT_ROOT / 'data' / 'app.db'}"
DATABASE_URL = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
DB_RESET = _env_bool("DB_RESET", False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "APP_ENV",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "DEFAULT_DATABASE_URL",
    "DEV_PORTAL_API_KEY",
    "DEV_PORTAL_BASE_URL",
    "HTTP_TIMEOUT",
    "IS_PRODUCTION",
    "LOG_LEVEL",
    "NONCE_COOKIE_NAME",
    "NONCE_MAX_AGE",
    "WLD_ACTION",
    "WLD_APP_ID",
    "WLD_SIGNAL",
    "WORLDCHAIN_RPC_URL",
]
