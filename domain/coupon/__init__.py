"""Coupon domain exports."""
from .entity import Coupon, DiscountType, UserCouponUsage
from .evaluator import CouponEvaluator
from .repository import CouponRepository

__all__ = ["Coupon", "DiscountType", "UserCouponUsage", "CouponEvaluator", "CouponRepository"]
