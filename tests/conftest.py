"""Pytest bootstrap configuration.

Environment variables are set before any application module is imported,
because settings are read at import time.
"""
import os

os.environ.setdefault("DATABASE__URL", "sqlite+aiosqlite:///./test_orders.db")
os.environ.setdefault("DATABASE__ECHO", "false")

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from application.services.order_service import OrderApplicationService  # noqa: E402
from infrastructure.models import (  # noqa: E402
    Base,
    CartItemModel,
    CouponModel,
    OrderModel,
    ProductModel,
    UserCouponModel,
    WalletModel,
)
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork  # noqa: E402


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite so separate sessions really contend for the same rows"""
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def uow_factory(session_factory):
    def _factory(readonly: bool = False) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory, readonly=readonly)
    return _factory


@pytest.fixture
def order_service(uow_factory) -> OrderApplicationService:
    return OrderApplicationService(uow_factory)


class Store:
    """Seeds and inspects rows owned by collaborating services"""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    async def _add(self, model):
        async with self._session_factory() as session:
            session.add(model)
            await session.commit()
            return model

    async def product(self, name="Widget", price="100.00", stock=10, is_active=True) -> int:
        model = await self._add(
            ProductModel(name=name, price=Decimal(price), stock=stock, is_active=is_active)
        )
        return model.id

    async def cart_item(self, user_id: int, product_id: int, quantity: int = 1) -> None:
        await self._add(CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity))

    async def wallet(self, user_id: int, balance="0") -> None:
        await self._add(WalletModel(user_id=user_id, balance=Decimal(balance)))

    async def coupon(
        self,
        code="SAVE20",
        discount_type="PERCENTAGE",
        discount_value="20",
        min_purchase: Optional[str] = None,
        max_discount: Optional[str] = None,
        total_usage_limit: Optional[int] = None,
        usage_limit_per_user: Optional[int] = None,
        is_active=True,
        valid_from: Optional[datetime] = None,
        valid_to: Optional[datetime] = None,
        current_usage_count: int = 0,
    ) -> int:
        now = datetime.now(timezone.utc)
        model = await self._add(
            CouponModel(
                code=code,
                discount_type=discount_type,
                discount_value=Decimal(discount_value),
                min_purchase=Decimal(min_purchase) if min_purchase is not None else None,
                max_discount=Decimal(max_discount) if max_discount is not None else None,
                total_usage_limit=total_usage_limit,
                usage_limit_per_user=usage_limit_per_user,
                is_active=is_active,
                valid_from=valid_from or now - timedelta(days=1),
                valid_to=valid_to or now + timedelta(days=1),
                current_usage_count=current_usage_count,
            )
        )
        return model.id

    async def stock_of(self, product_id: int) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProductModel.stock).where(ProductModel.id == product_id)
            )
            return result.scalar_one()

    async def balance_of(self, user_id: int) -> Decimal:
        async with self._session_factory() as session:
            result = await session.execute(
                select(WalletModel.balance).where(WalletModel.user_id == user_id)
            )
            return Decimal(str(result.scalar_one()))

    async def coupon_usage(self, coupon_id: int) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CouponModel.current_usage_count).where(CouponModel.id == coupon_id)
            )
            return result.scalar_one()

    async def user_coupon_usage(self, user_id: int, coupon_id: int) -> Optional[int]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(UserCouponModel.usage_count).where(
                    UserCouponModel.user_id == user_id,
                    UserCouponModel.coupon_id == coupon_id,
                )
            )
            return result.scalar_one_or_none()

    async def cart_size(self, user_id: int) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CartItemModel).where(CartItemModel.user_id == user_id)
            )
            return len(result.scalars().all())

    async def order_count(self, user_id: int) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(OrderModel).where(OrderModel.user_id == user_id)
            )
            return len(result.scalars().all())


@pytest.fixture
def store(session_factory) -> Store:
    return Store(session_factory)
