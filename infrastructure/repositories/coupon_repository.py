"""
Coupon repository - definitions plus the global and per-user usage counters

Both counters only move through conditional updates, so concurrent orders
using the same coupon cannot push either counter past its limit.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.coupon.entity import Coupon, DiscountType, UserCouponUsage
from domain.coupon.repository import CouponRepository
from infrastructure.models.coupon import CouponModel, UserCouponModel
from core.logging_config import get_logger


logger = get_logger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _decimal_or_none(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


class SQLAlchemyCouponRepository(CouponRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: CouponModel) -> Coupon:
        return Coupon(
            id=model.id,
            code=model.code,
            discount_type=DiscountType(model.discount_type),
            discount_value=Decimal(str(model.discount_value)),
            valid_from=model.valid_from,
            valid_to=model.valid_to,
            is_active=bool(model.is_active),
            min_purchase=_decimal_or_none(model.min_purchase),
            max_discount=_decimal_or_none(model.max_discount),
            total_usage_limit=model.total_usage_limit,
            current_usage_count=model.current_usage_count,
            usage_limit_per_user=model.usage_limit_per_user,
        )

    async def read_by_code(self, code: str) -> Optional[Coupon]:
        result = await self.session.execute(
            select(CouponModel).where(CouponModel.code == code)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_id(self, coupon_id: int) -> Optional[Coupon]:
        result = await self.session.execute(
            select(CouponModel).where(CouponModel.id == coupon_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def conditional_increment_usage(self, coupon_id: int) -> bool:
        result = await self.session.execute(
            update(CouponModel)
            .where(
                CouponModel.id == coupon_id,
                (CouponModel.total_usage_limit.is_(None))
                | (CouponModel.current_usage_count < CouponModel.total_usage_limit),
            )
            .values(current_usage_count=CouponModel.current_usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount > 0:
            logger.info("coupon_usage_incremented", coupon_id=coupon_id)
            return True

        logger.warning("coupon_usage_rejected", coupon_id=coupon_id)
        return False

    async def decrement_usage(self, coupon_id: int) -> None:
        await self.session.execute(
            update(CouponModel)
            .where(CouponModel.id == coupon_id, CouponModel.current_usage_count > 0)
            .values(current_usage_count=CouponModel.current_usage_count - 1)
            .execution_options(synchronize_session=False)
        )
        logger.info("coupon_usage_decremented", coupon_id=coupon_id)

    async def read_user_usage(self, user_id: int, coupon_id: int) -> Optional[UserCouponUsage]:
        result = await self.session.execute(
            select(UserCouponModel).where(
                UserCouponModel.user_id == user_id,
                UserCouponModel.coupon_id == coupon_id,
            )
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return UserCouponUsage(
            user_id=model.user_id,
            coupon_id=model.coupon_id,
            usage_count=model.usage_count,
            last_used_at=model.last_used_at,
        )

    async def _ensure_user_usage_row(self, user_id: int, coupon_id: int) -> None:
        """Create a zero usage row unless one exists; concurrent creators do not fail"""
        values = {"user_id": user_id, "coupon_id": coupon_id, "usage_count": 0}
        insert = _UPSERT_INSERTS.get(self.session.get_bind().dialect.name)
        if insert is not None:
            await self.session.execute(
                insert(UserCouponModel)
                .values(**values)
                .on_conflict_do_nothing(index_elements=["user_id", "coupon_id"])
            )
            return

        if await self.read_user_usage(user_id, coupon_id) is not None:
            return
        try:
            async with self.session.begin_nested():
                self.session.add(UserCouponModel(**values))
        except IntegrityError:
            # Another transaction created it first
            logger.debug("user_coupon_row_exists", user_id=user_id, coupon_id=coupon_id)

    async def upsert_increment_user_usage(
        self, user_id: int, coupon_id: int, limit: Optional[int]
    ) -> bool:
        await self._ensure_user_usage_row(user_id, coupon_id)

        stmt = update(UserCouponModel).where(
            UserCouponModel.user_id == user_id,
            UserCouponModel.coupon_id == coupon_id,
        )
        if limit is not None:
            stmt = stmt.where(UserCouponModel.usage_count < limit)
        result = await self.session.execute(
            stmt.values(
                usage_count=UserCouponModel.usage_count + 1,
                last_used_at=datetime.now(timezone.utc),
            ).execution_options(synchronize_session=False)
        )
        if result.rowcount > 0:
            logger.info("user_coupon_usage_incremented", user_id=user_id, coupon_id=coupon_id)
            return True

        logger.warning(
            "user_coupon_usage_rejected", user_id=user_id, coupon_id=coupon_id, limit=limit
        )
        return False

    async def decrement_user_usage(self, user_id: int, coupon_id: int) -> None:
        await self.session.execute(
            update(UserCouponModel)
            .where(
                UserCouponModel.user_id == user_id,
                UserCouponModel.coupon_id == coupon_id,
                UserCouponModel.usage_count > 0,
            )
            .values(usage_count=UserCouponModel.usage_count - 1)
            .execution_options(synchronize_session=False)
        )
        logger.info("user_coupon_usage_decremented", user_id=user_id, coupon_id=coupon_id)
