"""Unit of Work abstraction"""
from __future__ import annotations

from abc import ABC, abstractmethod

from domain.cart.repository import CartRepository
from domain.catalog.repository import ProductCatalogRepository
from domain.coupon.repository import CouponRepository
from domain.order.repository import OrderRepository, PaymentTransactionRepository
from domain.wallet.repository import WalletRepository


class AbstractUnitOfWork(ABC):
    """Transaction boundary for the application layer.

    Every repository exposed here shares one transaction: commit makes all of
    their writes visible together, rollback discards all of them.
    """

    order_repository: OrderRepository
    payment_transaction_repository: PaymentTransactionRepository
    product_repository: ProductCatalogRepository
    cart_repository: CartRepository
    wallet_repository: WalletRepository
    coupon_repository: CouponRepository

    def __init__(self, *, readonly: bool = False) -> None:
        self._committed = False
        self._readonly = readonly
        self.order_repository = None  # type: ignore[assignment]
        self.payment_transaction_repository = None  # type: ignore[assignment]
        self.product_repository = None  # type: ignore[assignment]
        self.cart_repository = None  # type: ignore[assignment]
        self.wallet_repository = None  # type: ignore[assignment]
        self.coupon_repository = None  # type: ignore[assignment]

    async def __aenter__(self) -> "AbstractUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            # Auto-commit only for writable units that were not committed explicitly
            if not self._readonly and not self._committed:
                await self.commit()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
