"""
Order repository ports
"""
from abc import ABC, abstractmethod
from typing import Optional, List

from .entity import Order, OrderStatus, PaymentStatus, PaymentTransaction


class OrderRepository(ABC):

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """Persist the order together with its items"""
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str, user_id: Optional[int] = None) -> Optional[Order]:
        """Load an order with items; restricted to the owner when user_id is given"""
        pass

    @abstractmethod
    async def get_for_update(self, order_id: str, user_id: int) -> Optional[Order]:
        """Same as get_by_id but holds a row lock on the order until the unit of work ends"""
        pass

    @abstractmethod
    async def update_status(
        self, order: Order, expected_status: Optional[PaymentStatus] = None
    ) -> Optional[Order]:
        """Write the order statuses; with expected_status, only while the stored
        payment status still equals it. None when the row did not qualify."""
        pass

    @abstractmethod
    async def list_by_user(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        pass

    @abstractmethod
    async def count_by_user(self, user_id: int, status: Optional[OrderStatus] = None) -> int:
        pass


class PaymentTransactionRepository(ABC):

    @abstractmethod
    async def create(self, transaction: PaymentTransaction) -> PaymentTransaction:
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> Optional[PaymentTransaction]:
        pass

    @abstractmethod
    async def update_status(
        self,
        order_id: str,
        status: PaymentStatus,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> Optional[PaymentTransaction]:
        pass
