from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Optional, Tuple

import pytest

from domain.cart import CartSnapshot, CartSnapshotLine
from domain.common.exceptions import (
    CouponNotFoundException,
    EmptyCartException,
    InsufficientStockException,
    ProductUnavailableException,
)
from domain.coupon import Coupon, CouponRepository, DiscountType, UserCouponUsage
from domain.pricing import PricingCalculator
from domain.wallet import WalletRepository


NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


class InMemoryCouponRepository(CouponRepository):
    def __init__(self, *coupons: Coupon):
        self.coupons = {c.code: c for c in coupons}
        self.usage: Dict[Tuple[int, int], int] = {}

    async def read_by_code(self, code: str) -> Optional[Coupon]:
        return self.coupons.get(code)

    async def get_by_id(self, coupon_id: int) -> Optional[Coupon]:
        return next((c for c in self.coupons.values() if c.id == coupon_id), None)

    async def conditional_increment_usage(self, coupon_id: int) -> bool:
        raise AssertionError("pricing must not write")

    async def decrement_usage(self, coupon_id: int) -> None:
        raise AssertionError("pricing must not write")

    async def read_user_usage(self, user_id: int, coupon_id: int) -> Optional[UserCouponUsage]:
        count = self.usage.get((user_id, coupon_id))
        if count is None:
            return None
        return UserCouponUsage(user_id=user_id, coupon_id=coupon_id, usage_count=count)

    async def upsert_increment_user_usage(self, user_id, coupon_id, limit) -> bool:
        raise AssertionError("pricing must not write")

    async def decrement_user_usage(self, user_id: int, coupon_id: int) -> None:
        raise AssertionError("pricing must not write")


class InMemoryWalletRepository(WalletRepository):
    def __init__(self, balances: Optional[Dict[int, Decimal]] = None):
        self.balances = balances or {}

    async def read_balance(self, user_id: int) -> Decimal:
        return self.balances.get(user_id, Decimal("0"))

    async def conditional_debit(self, user_id: int, amount: Decimal) -> bool:
        raise AssertionError("pricing must not write")

    async def credit(self, user_id: int, amount: Decimal) -> None:
        raise AssertionError("pricing must not write")


def line(product_id=1, price="100.00", quantity=1, active=True, stock=10, name="Widget"):
    return CartSnapshotLine(
        product_id=product_id,
        unit_price=Decimal(price),
        quantity=quantity,
        product_active=active,
        available_stock=stock,
        name=name,
    )


def coupon(**overrides) -> Coupon:
    fields = dict(
        id=1,
        code="SAVE20",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("20"),
        valid_from=NOW - timedelta(days=1),
        valid_to=NOW + timedelta(days=1),
    )
    fields.update(overrides)
    return Coupon(**fields)


def calculator(*coupons, balances=None) -> PricingCalculator:
    return PricingCalculator(InMemoryCouponRepository(*coupons), InMemoryWalletRepository(balances))


@pytest.mark.asyncio
async def test_empty_cart_rejected():
    with pytest.raises(EmptyCartException):
        await calculator().price(1, CartSnapshot(user_id=1), now=NOW)


@pytest.mark.asyncio
async def test_inactive_product_rejected():
    cart = CartSnapshot(user_id=1, lines=[line(), line(product_id=2, active=False, name="Gone")])
    with pytest.raises(ProductUnavailableException) as exc_info:
        await calculator().price(1, cart, now=NOW)
    assert exc_info.value.details["product_id"] == 2


@pytest.mark.asyncio
async def test_short_stock_rejected():
    cart = CartSnapshot(user_id=1, lines=[line(quantity=3, stock=2)])
    with pytest.raises(InsufficientStockException) as exc_info:
        await calculator().price(1, cart, now=NOW)
    assert exc_info.value.details == {"product_id": 1, "requested": 3, "available": 2}


@pytest.mark.asyncio
async def test_unknown_coupon_code():
    cart = CartSnapshot(user_id=1, lines=[line()])
    with pytest.raises(CouponNotFoundException):
        await calculator().price(1, cart, coupon_code="NOPE", now=NOW)


@pytest.mark.asyncio
async def test_subtotal_is_exact_sum_of_lines():
    cart = CartSnapshot(
        user_id=1,
        lines=[line(price="0.10", quantity=3), line(product_id=2, price="19.99", quantity=2)],
    )
    breakdown = await calculator().price(1, cart, now=NOW)
    assert breakdown.subtotal == Decimal("40.28")
    assert breakdown.final_amount == Decimal("40.28")
    assert [l.line_total for l in breakdown.lines] == [Decimal("0.30"), Decimal("39.98")]


@pytest.mark.asyncio
async def test_coupon_then_explicit_wallet():
    cart = CartSnapshot(user_id=1, lines=[line(price="500.00", quantity=2)])
    calc = calculator(
        coupon(min_purchase=Decimal("500"), max_discount=Decimal("200")),
        balances={1: Decimal("100")},
    )
    breakdown = await calc.price(
        1, cart, coupon_code="SAVE20", use_wallet=True,
        wallet_points_requested=Decimal("50"), now=NOW,
    )
    assert breakdown.subtotal == Decimal("1000.00")
    assert breakdown.coupon_discount == Decimal("200.00")
    assert breakdown.wallet_points_available == Decimal("100.00")
    assert breakdown.wallet_points_used == Decimal("50.00")
    assert breakdown.final_amount == Decimal("750.00")
    assert breakdown.coupon_id == 1


@pytest.mark.asyncio
async def test_auto_wallet_covers_whole_order():
    cart = CartSnapshot(user_id=1, lines=[line(price="30.00")])
    breakdown = await calculator(balances={1: Decimal("100")}).price(1, cart, use_wallet=True, now=NOW)
    assert breakdown.wallet_points_used == Decimal("30.00")
    assert breakdown.final_amount == Decimal("0.00")


@pytest.mark.asyncio
async def test_percentage_discount_rounded_half_up():
    cart = CartSnapshot(user_id=1, lines=[line(price="10.05")])
    breakdown = await calculator(coupon(discount_value=Decimal("15"))).price(
        1, cart, coupon_code="SAVE20", now=NOW
    )
    # 10.05 * 15% = 1.5075
    assert breakdown.coupon_discount == Decimal("1.51")
    assert breakdown.final_amount == Decimal("8.54")


@pytest.mark.asyncio
async def test_breakdown_adds_up():
    cart = CartSnapshot(user_id=1, lines=[line(price="33.33", quantity=3)])
    breakdown = await calculator(coupon(discount_value=Decimal("12.5")), balances={1: Decimal("7.77")}).price(
        1, cart, coupon_code="SAVE20", use_wallet=True, now=NOW
    )
    assert breakdown.final_amount == (
        breakdown.subtotal - breakdown.coupon_discount - breakdown.wallet_points_used
    )


@pytest.mark.asyncio
async def test_percentage_discount_uses_rounded_subtotal():
    # Fractional unit prices only reach the calculator from hand-built carts
    cart = CartSnapshot(user_id=1, lines=[line(price="1.045")])
    breakdown = await calculator(coupon(discount_value=Decimal("50"))).price(
        1, cart, coupon_code="SAVE20", now=NOW
    )
    assert breakdown.subtotal == Decimal("1.05")
    # 50% of 1.05, not of the exact 1.045
    assert breakdown.coupon_discount == Decimal("0.53")
    assert breakdown.final_amount == Decimal("0.52")
    assert breakdown.lines[0].line_total == Decimal("1.05")
