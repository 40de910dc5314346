"""
Coupon store port - definitions plus the global and per-user usage counters
"""
from abc import ABC, abstractmethod
from typing import Optional

from .entity import Coupon, UserCouponUsage


class CouponRepository(ABC):

    @abstractmethod
    async def read_by_code(self, code: str) -> Optional[Coupon]:
        pass

    @abstractmethod
    async def get_by_id(self, coupon_id: int) -> Optional[Coupon]:
        pass

    @abstractmethod
    async def conditional_increment_usage(self, coupon_id: int) -> bool:
        """+1 only while below total_usage_limit (or no limit). False on limit."""
        pass

    @abstractmethod
    async def decrement_usage(self, coupon_id: int) -> None:
        """-1, floored at zero"""
        pass

    @abstractmethod
    async def read_user_usage(self, user_id: int, coupon_id: int) -> Optional[UserCouponUsage]:
        pass

    @abstractmethod
    async def upsert_increment_user_usage(
        self, user_id: int, coupon_id: int, limit: Optional[int]
    ) -> bool:
        """Create on first use, +1 only while below limit. False on limit."""
        pass

    @abstractmethod
    async def decrement_user_usage(self, user_id: int, coupon_id: int) -> None:
        """-1, floored at zero"""
        pass
