"""Decimal helpers shared by the pricing and budget services.

Every figure is rounded to cents with ROUND_HALF_UP; binary floats never
enter the arithmetic.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, Optional

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any, default: Optional[Decimal] = None) -> Decimal:
    """Coerce ``value`` to Decimal via ``str`` so floats keep their printed value.

    Raises ``ValueError`` for unparseable input unless ``default`` is given.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        if default is not None:
            return default
        raise ValueError(f"not a number: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        if default is not None:
            return default
        raise ValueError(f"not a number: {value!r}")
    if not result.is_finite():
        if default is not None:
            return default
        raise ValueError(f"not a finite number: {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    """Sum then round once, so per-item rounding error does not accumulate."""
    return round_money(sum((to_decimal(v, ZERO) for v in values), ZERO))


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    return amount * percentage / HUNDRED


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 in UTC; naive datetimes (SQLite round-trips) are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
