from decimal import Decimal

import pytest

from application.dto import CalculateOrderDTO, PlaceOrderDTO
from domain.common.exceptions import (
    CouponUsageLimitReachedException,
    EmptyCartException,
    InsufficientStockException,
    InsufficientWalletBalanceException,
    ProductUnavailableException,
    UserCouponLimitReachedException,
)


pytestmark = pytest.mark.asyncio

USER = 1


async def test_preview_matches_placed_order(order_service, store):
    product = await store.product(price="500.00", stock=5)
    await store.cart_item(USER, product, quantity=2)
    await store.wallet(USER, "100")
    await store.coupon(code="SAVE20", discount_value="20", min_purchase="500", max_discount="200")

    dto = PlaceOrderDTO(coupon_code="SAVE20", use_wallet_points=True, wallet_points_to_use=Decimal("50"))
    preview = await order_service.calculate_preview(USER, dto)
    assert preview.subtotal == Decimal("1000.00")
    assert preview.coupon_discount == Decimal("200.00")
    assert preview.wallet_points_used == Decimal("50.00")
    assert preview.final_amount == Decimal("750.00")

    order = await order_service.place_order(USER, dto)
    assert order.total_amount == Decimal("1000.00")
    assert order.coupon_discount == Decimal("200.00")
    assert order.wallet_points_used == Decimal("50.00")
    assert order.final_amount == Decimal("750.00")
    assert order.coupon_code == "SAVE20"
    assert (order.payment_status, order.order_status) == ("PENDING", "PENDING")
    assert order.transaction is not None
    assert order.transaction.payment_status == "PENDING"


async def test_preview_writes_nothing(order_service, store):
    product = await store.product(stock=3)
    await store.cart_item(USER, product, quantity=2)
    await store.wallet(USER, "40")

    await order_service.calculate_preview(USER, CalculateOrderDTO(use_wallet_points=True))

    assert await store.stock_of(product) == 3
    assert await store.balance_of(USER) == Decimal("40")
    assert await store.cart_size(USER) == 1


async def test_commit_reserves_everything(order_service, store):
    first = await store.product(name="A", price="40.00", stock=5)
    second = await store.product(name="B", price="10.00", stock=1)
    await store.cart_item(USER, first, quantity=2)
    await store.cart_item(USER, second, quantity=1)
    await store.wallet(USER, "30")
    coupon_id = await store.coupon(code="FIVE", discount_type="FIXED", discount_value="5")

    order = await order_service.place_order(
        USER, PlaceOrderDTO(coupon_code="FIVE", use_wallet_points=True)
    )

    assert order.total_amount == Decimal("90.00")
    assert order.coupon_discount == Decimal("5.00")
    assert order.wallet_points_used == Decimal("30.00")
    assert order.final_amount == Decimal("55.00")
    assert await store.stock_of(first) == 3
    assert await store.stock_of(second) == 0
    assert await store.balance_of(USER) == Decimal("0")
    assert await store.coupon_usage(coupon_id) == 1
    assert await store.user_coupon_usage(USER, coupon_id) == 1
    assert await store.cart_size(USER) == 0


async def test_item_snapshot_keeps_price_and_name(order_service, store):
    product = await store.product(name="Lamp", price="12.50", stock=4)
    await store.cart_item(USER, product, quantity=2)

    order = await order_service.place_order(USER, PlaceOrderDTO())

    assert len(order.items) == 1
    item = order.items[0]
    assert (item.product_id, item.product_name, item.quantity) == (product, "Lamp", 2)
    assert item.unit_price == Decimal("12.50")
    assert item.line_total == Decimal("25.00")


async def test_empty_cart(order_service):
    with pytest.raises(EmptyCartException):
        await order_service.place_order(USER, PlaceOrderDTO())


async def test_inactive_product(order_service, store):
    product = await store.product(is_active=False)
    await store.cart_item(USER, product)
    with pytest.raises(ProductUnavailableException):
        await order_service.place_order(USER, PlaceOrderDTO())


async def test_failed_commit_leaves_no_trace(order_service, store):
    product = await store.product(stock=5)
    await store.cart_item(USER, product, quantity=6)

    with pytest.raises(InsufficientStockException):
        await order_service.place_order(USER, PlaceOrderDTO())

    assert await store.stock_of(product) == 5
    assert await store.cart_size(USER) == 1
    orders, total = await order_service.list_orders(USER)
    assert (orders, total) == ([], 0)


async def test_explicit_wallet_more_than_balance(order_service, store):
    product = await store.product(price="100.00")
    await store.cart_item(USER, product)
    await store.wallet(USER, "10")

    with pytest.raises(InsufficientWalletBalanceException):
        await order_service.place_order(
            USER, PlaceOrderDTO(use_wallet_points=True, wallet_points_to_use=Decimal("20"))
        )
    assert await store.balance_of(USER) == Decimal("10")


async def test_per_user_coupon_limit(order_service, store):
    product = await store.product(stock=10)
    coupon_id = await store.coupon(code="ONCE", usage_limit_per_user=1)

    await store.cart_item(USER, product)
    await order_service.place_order(USER, PlaceOrderDTO(coupon_code="ONCE"))

    await store.cart_item(USER, product)
    with pytest.raises(UserCouponLimitReachedException):
        await order_service.place_order(USER, PlaceOrderDTO(coupon_code="ONCE"))

    assert await store.user_coupon_usage(USER, coupon_id) == 1
    assert await store.coupon_usage(coupon_id) == 1
    assert await store.stock_of(product) == 9


async def test_global_coupon_limit(order_service, store):
    product = await store.product(stock=10)
    coupon_id = await store.coupon(code="LAST", total_usage_limit=1)

    await store.cart_item(1, product)
    await order_service.place_order(1, PlaceOrderDTO(coupon_code="LAST"))

    await store.cart_item(2, product)
    with pytest.raises(CouponUsageLimitReachedException):
        await order_service.place_order(2, PlaceOrderDTO(coupon_code="LAST"))

    assert await store.coupon_usage(coupon_id) == 1
    assert await store.user_coupon_usage(2, coupon_id) is None
