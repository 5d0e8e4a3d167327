"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    APP_ENV,
    COOKIE_SECURE,
    DATABASE_URL,
    DB_RESET,
    DEV_PORTAL_API_KEY,
    DEV_PORTAL_BASE_URL,
    HTTP_TIMEOUT,
    IS_PRODUCTION,
    NONCE_COOKIE_NAME,
    NONCE_MAX_AGE,
    WLD_ACTION,
    WLD_APP_ID,
    WLD_SIGNAL,
    WORLDCHAIN_RPC_URL,
)
from .database import engine, get_session
from .log import configure_logging
from .time import isoformat_z, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "APP_ENV",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "DEV_PORTAL_API_KEY",
    "DEV_PORTAL_BASE_URL",
    "HTTP_TIMEOUT",
    "IS_PRODUCTION",
    "NONCE_COOKIE_NAME",
    "NONCE_MAX_AGE",
    "WLD_ACTION",
    "WLD_APP_ID",
    "WLD_SIGNAL",
    "WORLDCHAIN_RPC_URL",
    "configure_logging",
    "engine",
    "get_session",
    "isoformat_z",
    "utcnow",
]
