"""
Coupon evaluator - eligibility checks and discount computation.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from domain.common.exceptions import (
    CouponInactiveException,
    CouponExpiredException,
    MinPurchaseNotMetException,
    CouponUsageLimitReachedException,
    UserCouponLimitReachedException,
)
from domain.common.money import ZERO
from .entity import Coupon, DiscountType, UserCouponUsage


class CouponEvaluator:
    """
    Eligibility is checked in a fixed order so the first failing rule decides the error:
    inactive -> outside validity window -> min purchase -> global quota -> per-user quota.
    """

    def check_eligibility(
        self,
        coupon: Coupon,
        subtotal: Decimal,
        user_usage: Optional[UserCouponUsage],
        now: Optional[datetime] = None,
    ) -> None:
        now = now or datetime.now(timezone.utc)

        if not coupon.is_active:
            raise CouponInactiveException(coupon.code)

        if not coupon.is_within_validity(now):
            raise CouponExpiredException(coupon.code)

        if coupon.min_purchase is not None and subtotal < coupon.min_purchase:
            raise MinPurchaseNotMetException(coupon.code, coupon.min_purchase, subtotal)

        if coupon.is_globally_exhausted():
            raise CouponUsageLimitReachedException(coupon.code)

        if coupon.is_exhausted_for(user_usage):
            raise UserCouponLimitReachedException(coupon.code)

    def compute_discount(self, coupon: Coupon, subtotal: Decimal) -> Decimal:
        if coupon.discount_type == DiscountType.PERCENTAGE:
            discount = subtotal * coupon.discount_value / Decimal(100)
            if coupon.max_discount is not None and discount > coupon.max_discount:
                discount = coupon.max_discount
        else:
            discount = coupon.discount_value

        # A coupon alone never drives the amount below zero
        return max(min(discount, subtotal), ZERO)

    def evaluate(
        self,
        coupon: Coupon,
        subtotal: Decimal,
        user_usage: Optional[UserCouponUsage],
        now: Optional[datetime] = None,
    ) -> Decimal:
        self.check_eligibility(coupon, subtotal, user_usage, now)
        return self.compute_discount(coupon, subtotal)
