"""SQLAlchemy Unit of Work implementation"""
from __future__ import annotations

from typing import Optional, Callable
import inspect

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.common.exceptions import StoreUnavailableException
from domain.common.unit_of_work import AbstractUnitOfWork
from infrastructure.database import AsyncSessionLocal
from infrastructure.repositories.cart_repository import SQLAlchemyCartRepository
from infrastructure.repositories.coupon_repository import SQLAlchemyCouponRepository
from infrastructure.repositories.order_repository import (
    SQLAlchemyOrderRepository,
    SQLAlchemyPaymentTransactionRepository,
)
from infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from infrastructure.repositories.wallet_repository import SQLAlchemyWalletRepository
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyUnitOfWork(AbstractUnitOfWork):
    """Unit of Work backed by one SQLAlchemy session and transaction"""

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession] = AsyncSessionLocal,
        session: Optional[AsyncSession] = None,
        *,
        readonly: bool = False,
    ) -> None:
        super().__init__(readonly=readonly)
        self._session_factory = session_factory
        self._external_session = session
        self.session: Optional[AsyncSession] = session

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        if self.session is None:
            self.session = self._session_factory()
        self.order_repository = SQLAlchemyOrderRepository(self.session)
        self.payment_transaction_repository = SQLAlchemyPaymentTransactionRepository(self.session)
        self.product_repository = SQLAlchemyProductRepository(self.session)
        self.cart_repository = SQLAlchemyCartRepository(self.session)
        self.wallet_repository = SQLAlchemyWalletRepository(self.session)
        self.coupon_repository = SQLAlchemyCouponRepository(self.session)
        # Only writable units open an explicit transaction
        if not self._readonly:
            self._transaction = await self.session.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        except OperationalError as commit_error:
            logger.error("unit_of_work_commit_failed", error=str(commit_error))
            raise StoreUnavailableException(str(commit_error.orig)) from commit_error
        finally:
            # commit/rollback normally ends the transaction; close it only if still active
            tx = getattr(self, "_transaction", None)
            if tx is not None and getattr(tx, "is_active", False):
                close = getattr(tx, "close", None)
                if callable(close):
                    res = close()
                    if inspect.isawaitable(res):
                        await res
            if self._external_session is None and self.session is not None:
                await self.session.close()
                self.session = None
            self.order_repository = None
            self.payment_transaction_repository = None
            self.product_repository = None
            self.cart_repository = None
            self.wallet_repository = None
            self.coupon_repository = None

        if isinstance(exc, OperationalError):
            logger.error("unit_of_work_store_error", error=str(exc))
            raise StoreUnavailableException(str(exc.orig)) from exc

    async def commit(self) -> None:
        if self._readonly:
            # Nothing to commit for read-only units
            self._committed = True
            return
        if self.session and self.session.in_transaction():
            await self.session.commit()
        self._committed = True

    async def rollback(self) -> None:
        if self.session and self.session.in_transaction():
            await self.session.rollback()
        self._committed = False
