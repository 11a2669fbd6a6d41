"""Input coercion shared by services and routes."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from ..errors import ValidationError
from ..models.base import MONEY_PLACES

MONEY_QUANTUM = Decimal(1).scaleb(-MONEY_PLACES)


def to_decimal(value: Any, *, field: str = "amount") -> Decimal:
    """Coerce JSON numbers/strings to Decimal without float rounding noise."""

    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"{field} must be a number") from exc
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    return result


def to_money(value: Any, *, field: str = "amount") -> Decimal:
    """Coerce to Decimal rounded half-up to the stored money scale."""

    try:
        return to_decimal(value, field=field).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} is out of range") from exc


def positive_amount(value: Any, *, field: str = "amount") -> Decimal:
    amount = to_money(value, field=field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def to_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field} must be an integer") from exc
    if not parsed.is_finite() or parsed != parsed.to_integral_value():
        raise ValidationError(f"{field} must be an integer")
    return int(parsed)


def positive_quantity(value: Any, *, field: str = "quantity") -> int:
    quantity = to_int(value, field=field)
    if quantity <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return quantity


def normalize_symbol(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("symbol is required")
    return value.strip().upper()


def parse_timestamp(value: Any, *, field: str = "timestamp", end_of_day: bool = False) -> datetime:
    """Parse an ISO-8601 date or datetime into naive UTC.

    A bare date maps to the start of that day, or to its last instant when
    ``end_of_day`` is set.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.max if end_of_day else time.min)
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        try:
            if len(raw) == 10:
                day = date.fromisoformat(raw)
                parsed = datetime.combine(day, time.max if end_of_day else time.min)
            else:
                parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO-8601 date or datetime") from exc
    else:
        raise ValidationError(f"{field} is required")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def optional_int(value: Any, *, field: str, minimum: int = 0) -> Optional[int]:
    if value is None or value == "":
        return None
    parsed = to_int(value, field=field)
    if parsed < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return parsed
