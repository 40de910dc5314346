"""
Money and quantity primitives.

Amounts are ``Decimal`` end to end. Sums stay exact; rounding (half-up to
two fractional digits) is applied only when a value leaves the calculator
as part of a breakdown or an order row.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from domain.common.exceptions import DomainValidationException


MONEY_SCALE = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[Decimal, int, str, float]


def to_decimal(value: Number) -> Decimal:
    """Exact conversion; floats go through ``str`` to avoid binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise DomainValidationException(f"Invalid amount: {value!r}")


def quantize_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(MONEY_SCALE, rounding=ROUND_HALF_UP)


def ensure_non_negative(value: Number, *, field: str) -> Decimal:
    amount = to_decimal(value)
    if amount < 0:
        raise DomainValidationException(f"{field} cannot be negative: {amount}", field=field)
    return amount


def ensure_quantity(value: int, *, field: str = "quantity") -> int:
    """Stock and usage counters are non-negative integers."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainValidationException(f"{field} must be an integer: {value!r}", field=field)
    if value < 0:
        raise DomainValidationException(f"{field} cannot be negative: {value}", field=field)
    return value
