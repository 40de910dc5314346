"""
Pricing calculator - turns a cart snapshot plus coupon/wallet inputs into a priced breakdown.

Read only: it looks up the coupon, the user's coupon usage and the wallet balance
but never mutates anything. Commit re-runs it inside its own unit of work, so a
preview computed here is informational only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from domain.cart.entity import CartSnapshot
from domain.common.exceptions import (
    EmptyCartException,
    ProductUnavailableException,
    InsufficientStockException,
    CouponNotFoundException,
)
from domain.common.money import ZERO, quantize_money
from domain.coupon.entity import Coupon
from domain.coupon.evaluator import CouponEvaluator
from domain.coupon.repository import CouponRepository
from domain.wallet.allocator import WalletAllocator
from domain.wallet.repository import WalletRepository


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    name: Optional[str]
    unit_price: Decimal
    quantity: int
    line_total: Decimal


@dataclass
class PriceBreakdown:
    subtotal: Decimal
    coupon_discount: Decimal
    wallet_points_available: Decimal
    wallet_points_used: Decimal
    final_amount: Decimal
    coupon_code: Optional[str] = None
    coupon: Optional[Coupon] = None
    lines: List[PricedLine] = field(default_factory=list)

    @property
    def coupon_id(self) -> Optional[int]:
        return self.coupon.id if self.coupon else None


def validate_cart(cart: CartSnapshot) -> None:
    """Empty cart, inactive product and short stock checks, first failing line wins"""
    if cart.is_empty():
        raise EmptyCartException()
    for line in cart.lines:
        if not line.product_active:
            raise ProductUnavailableException(line.product_id, line.name)
        if line.quantity > line.available_stock:
            raise InsufficientStockException(line.product_id, line.quantity, line.available_stock)


class PricingCalculator:
    """Composes the coupon evaluator and wallet allocator over a cart snapshot"""

    def __init__(
        self,
        coupon_repository: CouponRepository,
        wallet_repository: WalletRepository,
        evaluator: Optional[CouponEvaluator] = None,
        allocator: Optional[WalletAllocator] = None,
    ):
        self.coupon_repository = coupon_repository
        self.wallet_repository = wallet_repository
        self.evaluator = evaluator or CouponEvaluator()
        self.allocator = allocator or WalletAllocator()

    async def price(
        self,
        user_id: int,
        cart: CartSnapshot,
        coupon_code: Optional[str] = None,
        use_wallet: bool = False,
        wallet_points_requested: Optional[Decimal] = None,
        now: Optional[datetime] = None,
    ) -> PriceBreakdown:
        validate_cart(cart)

        # Line totals are exact. Coupons price off the rounded subtotal, the same figure
        # stored as the order total; two-decimal unit prices never round here.
        subtotal = quantize_money(cart.subtotal())

        coupon: Optional[Coupon] = None
        coupon_discount = ZERO
        if coupon_code:
            coupon = await self.coupon_repository.read_by_code(coupon_code)
            if coupon is None:
                raise CouponNotFoundException(coupon_code)
            usage = await self.coupon_repository.read_user_usage(user_id, coupon.id)
            # Quantized before it feeds the wallet step so the breakdown adds up exactly
            coupon_discount = quantize_money(self.evaluator.evaluate(
                coupon, subtotal, usage, now or datetime.now(timezone.utc)
            ))

        available = await self.wallet_repository.read_balance(user_id)
        amount_after_coupon = subtotal - coupon_discount
        wallet_points_used = self.allocator.allocate(
            available, amount_after_coupon, use_wallet, wallet_points_requested
        )

        final_amount = max(amount_after_coupon - wallet_points_used, ZERO)

        return PriceBreakdown(
            subtotal=quantize_money(subtotal),
            coupon_discount=quantize_money(coupon_discount),
            wallet_points_available=quantize_money(available),
            wallet_points_used=quantize_money(wallet_points_used),
            final_amount=quantize_money(final_amount),
            coupon_code=coupon.code if coupon else None,
            coupon=coupon,
            lines=[
                PricedLine(
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    line_total=quantize_money(line.line_total),
                )
                for line in cart.lines
            ],
        )
