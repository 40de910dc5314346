"""
Cart repository
"""
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.cart.entity import CartLine
from domain.cart.repository import CartRepository
from infrastructure.models.cart import CartItemModel
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyCartRepository(CartRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_cart_lines(self, user_id: int) -> List[CartLine]:
        result = await self.session.execute(
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        return [
            CartLine(product_id=item.product_id, quantity=item.quantity)
            for item in result.scalars().all()
        ]

    async def clear_cart(self, user_id: int) -> int:
        result = await self.session.execute(
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        logger.info("cart_cleared", user_id=user_id, items=result.rowcount)
        return result.rowcount
