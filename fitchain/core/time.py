"""Time helpers shared by models and services."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime as a naive value."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_z(value: datetime | None) -> str | None:
    """Render a stored naive UTC datetime the way the client expects."""
    if value is None:
        return None
    return value.isoformat() + "Z"


__all__ = ["isoformat_z", "utcnow"]
