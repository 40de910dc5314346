"""
Order settlement domain service - commit and reconcile

Both operations run inside a unit of work owned by the caller. Every write goes
through a conditional update on a shared counter; a counter that does not
qualify raises, and the caller's unit of work rolls the whole attempt back.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
import uuid

from domain.common.exceptions import (
    AlreadySettledException,
    CouponUsageLimitReachedException,
    InsufficientStockException,
    InsufficientWalletBalanceException,
    OrderNotFoundException,
    UserCouponLimitReachedException,
)
from domain.common.money import ZERO
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.pricing.calculator import PriceBreakdown, PricingCalculator
from domain.pricing.snapshot import load_cart_snapshot
from .entity import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentOutcome,
    PaymentStatus,
    PaymentTransaction,
)
from .events import OrderPaymentFailed, OrderPaymentSucceeded, OrderPlaced


class OrderSettlementService:
    """
    Order settlement domain service

    Responsibilities:
    1. Re-price the cart and turn it into an order atomically (commit)
    2. Apply a trusted payment outcome exactly once (reconcile)
    3. Undo reservations when a payment fails
    4. Collect domain events
    """

    def __init__(self, uow: AbstractUnitOfWork, calculator: Optional[PricingCalculator] = None):
        self.uow = uow
        self.calculator = calculator or PricingCalculator(
            uow.coupon_repository, uow.wallet_repository
        )
        self.events: List = []

    async def preview(
        self,
        user_id: int,
        coupon_code: Optional[str] = None,
        use_wallet: bool = False,
        wallet_points_requested: Optional[Decimal] = None,
        now: Optional[datetime] = None,
    ) -> PriceBreakdown:
        cart = await load_cart_snapshot(
            user_id, self.uow.cart_repository, self.uow.product_repository
        )
        return await self.calculator.price(
            user_id,
            cart,
            coupon_code=coupon_code,
            use_wallet=use_wallet,
            wallet_points_requested=wallet_points_requested,
            now=now,
        )

    async def commit(
        self,
        user_id: int,
        coupon_code: Optional[str] = None,
        use_wallet: bool = False,
        wallet_points_requested: Optional[Decimal] = None,
        payment_method: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Order:
        """
        Turn the user's cart into a PENDING order

        Steps, all within the caller's unit of work:
        1. Re-read the cart and re-run pricing (preview results are never trusted)
        2. Create the order and its item snapshots
        3. Reserve stock, wallet points and coupon usage via conditional updates
        4. Clear the cart and open a PENDING payment transaction
        """
        breakdown = await self.preview(
            user_id,
            coupon_code=coupon_code,
            use_wallet=use_wallet,
            wallet_points_requested=wallet_points_requested,
            now=now,
        )

        order = Order(
            id=str(uuid.uuid4()),
            user_id=user_id,
            total_amount=breakdown.subtotal,
            coupon_discount=breakdown.coupon_discount,
            wallet_points_used=breakdown.wallet_points_used,
            final_amount=breakdown.final_amount,
            coupon_id=breakdown.coupon_id,
            coupon_code=breakdown.coupon_code,
            payment_status=PaymentStatus.PENDING,
            order_status=OrderStatus.PENDING,
            items=[
                OrderItem(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    product_name=line.name,
                )
                for line in breakdown.lines
            ],
            created_at=now or datetime.now(timezone.utc),
        )
        order = await self.uow.order_repository.create(order)

        for item in order.items:
            reserved = await self.uow.product_repository.conditional_decrement_stock(
                item.product_id, item.quantity
            )
            if not reserved:
                raise InsufficientStockException(item.product_id, item.quantity)

        if breakdown.wallet_points_used > ZERO:
            debited = await self.uow.wallet_repository.conditional_debit(
                user_id, breakdown.wallet_points_used
            )
            if not debited:
                raise InsufficientWalletBalanceException(breakdown.wallet_points_used)

        coupon = breakdown.coupon
        if coupon is not None:
            coupons = self.uow.coupon_repository
            if not await coupons.conditional_increment_usage(coupon.id):
                raise CouponUsageLimitReachedException(coupon.code)
            if not await coupons.upsert_increment_user_usage(
                user_id, coupon.id, coupon.usage_limit_per_user
            ):
                raise UserCouponLimitReachedException(coupon.code)

        await self.uow.cart_repository.clear_cart(user_id)

        order.transaction = await self.uow.payment_transaction_repository.create(
            PaymentTransaction(
                order_id=order.id,
                payment_status=PaymentStatus.PENDING,
                payment_method=payment_method,
            )
        )

        self.events.append(OrderPlaced(
            order_id=order.id,
            user_id=user_id,
            final_amount=str(order.final_amount),
            coupon_id=order.coupon_id,
        ))
        return order

    async def reconcile(
        self,
        order_id: str,
        user_id: int,
        outcome: PaymentOutcome,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> Order:
        """
        Apply a payment outcome to a PENDING order

        Business rules:
        1. The order row stays locked until the unit of work ends, so
           concurrent callbacks for one order are applied one at a time
        2. A settled SUCCESS (or REFUNDED) order is never changed again
        3. FAILED on an already FAILED order is a no-op
        4. SUCCESS on a FAILED order is rejected; its reservations are gone
        """
        outcome = PaymentOutcome(outcome)
        order = await self.uow.order_repository.get_for_update(order_id, user_id)
        if order is None:
            raise OrderNotFoundException(order_id)

        self._ensure_transition_allowed(order, outcome)
        if not order.is_pending():
            return order

        if outcome == PaymentOutcome.SUCCESS:
            order.mark_paid()
        else:
            order.mark_failed()

        # Compare-and-set on the stored status, for stores without row locks
        updated = await self.uow.order_repository.update_status(
            order, expected_status=PaymentStatus.PENDING
        )
        if updated is None:
            current = await self.uow.order_repository.get_by_id(order_id, user_id=user_id)
            self._ensure_transition_allowed(current, outcome)
            return current
        order = updated

        if outcome == PaymentOutcome.SUCCESS:
            self.events.append(OrderPaymentSucceeded(
                order_id=order.id,
                user_id=user_id,
                transaction_id=transaction_id,
            ))
        else:
            await self._compensate(order)
            self.events.append(OrderPaymentFailed(
                order_id=order.id,
                user_id=user_id,
                restored_items=len(order.items),
                restored_wallet_points=str(order.wallet_points_used),
            ))

        order.transaction = await self.uow.payment_transaction_repository.update_status(
            order.id,
            order.payment_status,
            payment_method=payment_method,
            transaction_id=transaction_id,
        )
        return order

    @staticmethod
    def _ensure_transition_allowed(order: Order, outcome: PaymentOutcome) -> None:
        """PENDING accepts either outcome; FAILED only accepts a repeated FAILED"""
        if order.is_pending():
            return
        if order.payment_status == PaymentStatus.FAILED and outcome == PaymentOutcome.FAILED:
            return
        raise AlreadySettledException(order.id, order.payment_status.value)

    async def _compensate(self, order: Order) -> None:
        """Release everything commit reserved for this order"""
        for item in order.items:
            await self.uow.product_repository.increment_stock(item.product_id, item.quantity)

        if order.wallet_points_used > ZERO:
            await self.uow.wallet_repository.credit(order.user_id, order.wallet_points_used)

        if order.coupon_id is not None:
            await self.uow.coupon_repository.decrement_usage(order.coupon_id)
            await self.uow.coupon_repository.decrement_user_usage(order.user_id, order.coupon_id)

    def clear_events(self) -> List:
        events = self.events[:]
        self.events.clear()
        return events
