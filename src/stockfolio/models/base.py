"""Shared column conventions for the SQLModel tables."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

MONEY_DIGITS = 18
MONEY_PLACES = 4

ZERO = Decimal("0")


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so we never store it."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def money_str(value: Decimal | None) -> str | None:
    """Render a stored amount for JSON payloads."""

    if value is None:
        return None
    return format(Decimal(value).quantize(Decimal(1).scaleb(-MONEY_PLACES)), "f")
