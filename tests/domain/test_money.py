from decimal import Decimal

import pytest

from domain.common.exceptions import DomainValidationException
from domain.common.money import ensure_quantity, quantize_money, to_decimal


def test_quantize_rounds_half_up():
    assert quantize_money(Decimal("10.005")) == Decimal("10.01")
    assert quantize_money(Decimal("10.004")) == Decimal("10.00")
    assert quantize_money(Decimal("2.675")) == Decimal("2.68")


def test_float_goes_through_str():
    assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")


def test_invalid_amount_rejected():
    with pytest.raises(DomainValidationException):
        to_decimal("abc")


@pytest.mark.parametrize("value", [-1, 1.5, True, "3"])
def test_quantity_guard(value):
    with pytest.raises(DomainValidationException):
        ensure_quantity(value)


def test_quantity_zero_allowed():
    assert ensure_quantity(0) == 0
