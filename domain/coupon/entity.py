"""
Coupon domain entities
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Coupon:
    """
    Coupon definition plus its global usage counter.

    Invariants:
    1. current_usage_count >= 0
    2. current_usage_count <= total_usage_limit when a limit is set
    3. max_discount only applies to PERCENTAGE coupons
    """

    id: int
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    valid_from: datetime
    valid_to: datetime
    is_active: bool = True
    min_purchase: Optional[Decimal] = None
    max_discount: Optional[Decimal] = None
    total_usage_limit: Optional[int] = None
    current_usage_count: int = 0
    usage_limit_per_user: Optional[int] = None

    def __post_init__(self):
        self.discount_type = DiscountType(self.discount_type)
        if self.discount_value < 0:
            raise DomainValidationException(
                f"Discount value cannot be negative: {self.discount_value}",
                field="discount_value",
            )
        if self.current_usage_count < 0:
            raise DomainValidationException(
                f"Usage count cannot be negative: {self.current_usage_count}",
                field="current_usage_count",
            )
        self.valid_from = _ensure_utc(self.valid_from)
        self.valid_to = _ensure_utc(self.valid_to)

    def is_within_validity(self, now: datetime) -> bool:
        """Inclusive on both ends"""
        now = _ensure_utc(now)
        return self.valid_from <= now <= self.valid_to

    def is_globally_exhausted(self) -> bool:
        return (
            self.total_usage_limit is not None
            and self.current_usage_count >= self.total_usage_limit
        )

    def is_exhausted_for(self, usage: Optional["UserCouponUsage"]) -> bool:
        if self.usage_limit_per_user is None or usage is None:
            return False
        return usage.usage_count >= self.usage_limit_per_user

    @property
    def remaining_global_uses(self) -> Optional[int]:
        if self.total_usage_limit is None:
            return None
        return max(self.total_usage_limit - self.current_usage_count, 0)


@dataclass
class UserCouponUsage:
    user_id: int
    coupon_id: int
    usage_count: int = 0
    last_used_at: Optional[datetime] = None
