# core/quantities.py

"""
Quantity / money normalizers shared by the ledger services.

- Quantities are non-negative real numbers stored with 3 decimal places.
- Money is stored with 2 decimal places.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.exceptions import InvalidArgumentError

QTY_PLACES = Decimal("0.001")
TWOPLACES = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value, *, field_name="value") -> Decimal:
    if value is None or value == "":
        raise InvalidArgumentError(f"{field_name} is required")

    if isinstance(value, bool):
        # bool is an int subclass in Python
        raise InvalidArgumentError(f"{field_name} must be a number")

    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidArgumentError(f"{field_name} must be a number") from exc

    if not result.is_finite():
        raise InvalidArgumentError(f"{field_name} must be a finite number")
    return result


def qty(value, *, field_name="quantity") -> Decimal:
    return to_decimal(value, field_name=field_name).quantize(QTY_PLACES, rounding=ROUND_HALF_UP)


def positive_qty(value, *, field_name="quantity") -> Decimal:
    q = qty(value, field_name=field_name)
    if q <= ZERO:
        raise InvalidArgumentError(f"{field_name} must be greater than zero")
    return q


def money(value, *, field_name="amount") -> Decimal:
    m = to_decimal(value, field_name=field_name).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    if m < ZERO:
        raise InvalidArgumentError(f"{field_name} cannot be negative")
    return m
