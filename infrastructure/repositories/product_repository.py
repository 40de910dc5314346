"""
Product catalog repository - pricing reads and the conditional stock counter
"""
from decimal import Decimal
from typing import Dict, Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.catalog.entity import ProductPricing
from domain.catalog.repository import ProductCatalogRepository
from infrastructure.models.product import ProductModel
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyProductRepository(ProductCatalogRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: ProductModel) -> ProductPricing:
        return ProductPricing(
            product_id=model.id,
            name=model.name,
            unit_price=Decimal(str(model.price)),
            stock=model.stock,
            is_active=bool(model.is_active),
        )

    async def read_for_pricing(self, product_ids: Iterable[int]) -> Dict[int, ProductPricing]:
        ids = list(product_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        )
        return {model.id: self._to_entity(model) for model in result.scalars().all()}

    async def conditional_decrement_stock(self, product_id: int, quantity: int) -> bool:
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount > 0:
            logger.debug("stock_decremented", product_id=product_id, quantity=quantity)
            return True

        logger.warning("stock_decrement_rejected", product_id=product_id, quantity=quantity)
        return False

    async def increment_stock(self, product_id: int, quantity: int) -> None:
        await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        logger.info("stock_restored", product_id=product_id, quantity=quantity)
