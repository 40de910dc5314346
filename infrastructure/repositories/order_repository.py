"""
Order repository implementations - orders with item snapshots, and payment transactions
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.order.entity import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    PaymentTransaction,
)
from domain.order.repository import OrderRepository, PaymentTransactionRepository
from infrastructure.models.order import OrderItemModel, OrderModel, PaymentTransactionModel
from core.logging_config import get_logger


logger = get_logger(__name__)


def _transaction_to_entity(model: PaymentTransactionModel) -> PaymentTransaction:
    return PaymentTransaction(
        id=model.id,
        order_id=model.order_id,
        payment_status=PaymentStatus(model.payment_status),
        payment_method=model.payment_method,
        transaction_id=model.transaction_id,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of the order repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: OrderModel) -> Order:
        return Order(
            id=model.id,
            user_id=model.user_id,
            total_amount=Decimal(str(model.total_amount)),
            coupon_discount=Decimal(str(model.coupon_discount)),
            wallet_points_used=Decimal(str(model.wallet_points_used)),
            final_amount=Decimal(str(model.final_amount)),
            coupon_id=model.coupon_id,
            coupon_code=model.coupon.code if model.coupon else None,
            payment_status=PaymentStatus(model.payment_status),
            order_status=OrderStatus(model.order_status),
            items=[
                OrderItem(
                    id=item.id,
                    order_id=item.order_id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=Decimal(str(item.unit_price)),
                )
                for item in model.items
            ],
            transaction=_transaction_to_entity(model.transaction) if model.transaction else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Order) -> OrderModel:
        return OrderModel(
            id=entity.id,
            user_id=entity.user_id,
            total_amount=entity.total_amount,
            coupon_discount=entity.coupon_discount,
            wallet_points_used=entity.wallet_points_used,
            final_amount=entity.final_amount,
            coupon_id=entity.coupon_id,
            payment_status=entity.payment_status.value,
            order_status=entity.order_status.value,
            created_at=entity.created_at,
            items=[
                OrderItemModel(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in entity.items
            ],
        )

    def _select(self):
        # populate_existing refreshes rows already in the identity map
        return select(OrderModel).execution_options(populate_existing=True)

    async def create(self, order: Order) -> Order:
        self.session.add(self._to_model(order))
        await self.session.flush()
        logger.info(
            "order_created",
            order_id=order.id,
            user_id=order.user_id,
            items=len(order.items),
            final_amount=order.final_amount,
        )
        created = await self.get_by_id(order.id)
        return created

    async def get_by_id(self, order_id: str, user_id: Optional[int] = None) -> Optional[Order]:
        query = self._select().where(OrderModel.id == order_id)
        if user_id is not None:
            query = query.where(OrderModel.user_id == user_id)
        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_update(self, order_id: str, user_id: int) -> Optional[Order]:
        result = await self.session.execute(
            self._select()
            .where(OrderModel.id == order_id, OrderModel.user_id == user_id)
            .with_for_update()
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def update_status(
        self, order: Order, expected_status: Optional[PaymentStatus] = None
    ) -> Optional[Order]:
        stmt = update(OrderModel).where(OrderModel.id == order.id)
        if expected_status is not None:
            stmt = stmt.where(OrderModel.payment_status == PaymentStatus(expected_status).value)
        result = await self.session.execute(
            stmt
            .values(
                payment_status=order.payment_status.value,
                order_status=order.order_status.value,
                updated_at=order.updated_at or datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning(
                "order_status_update_rejected",
                order_id=order.id,
                expected_status=expected_status.value if expected_status else None,
            )
            return None

        logger.info(
            "order_status_updated",
            order_id=order.id,
            payment_status=order.payment_status.value,
            order_status=order.order_status.value,
        )
        return await self.get_by_id(order.id)

    async def list_by_user(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        query = select(OrderModel).where(OrderModel.user_id == user_id)

        if status:
            query = query.where(OrderModel.order_status == status.value)

        query = query.order_by(OrderModel.created_at.desc(), OrderModel.id).offset(skip).limit(limit)

        result = await self.session.execute(query)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def count_by_user(self, user_id: int, status: Optional[OrderStatus] = None) -> int:
        query = select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)

        if status:
            query = query.where(OrderModel.order_status == status.value)

        result = await self.session.execute(query)
        return result.scalar_one()


class SQLAlchemyPaymentTransactionRepository(PaymentTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: PaymentTransaction) -> PaymentTransaction:
        model = PaymentTransactionModel(
            order_id=transaction.order_id,
            payment_status=transaction.payment_status.value,
            payment_method=transaction.payment_method,
            transaction_id=transaction.transaction_id,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        logger.info("payment_transaction_created", order_id=model.order_id)
        return _transaction_to_entity(model)

    async def get_by_order_id(self, order_id: str) -> Optional[PaymentTransaction]:
        result = await self.session.execute(
            select(PaymentTransactionModel).where(PaymentTransactionModel.order_id == order_id)
        )
        model = result.scalar_one_or_none()
        return _transaction_to_entity(model) if model else None

    async def update_status(
        self,
        order_id: str,
        status: PaymentStatus,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> Optional[PaymentTransaction]:
        result = await self.session.execute(
            select(PaymentTransactionModel).where(PaymentTransactionModel.order_id == order_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            logger.warning("payment_transaction_missing", order_id=order_id)
            return None

        model.payment_status = PaymentStatus(status).value
        if payment_method is not None:
            model.payment_method = payment_method
        if transaction_id is not None:
            model.transaction_id = transaction_id

        await self.session.flush()
        await self.session.refresh(model)

        logger.info(
            "payment_transaction_updated",
            order_id=order_id,
            status=model.payment_status,
            transaction_id=model.transaction_id,
        )
        return _transaction_to_entity(model)
