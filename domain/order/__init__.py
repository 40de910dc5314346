"""Order domain exports."""
from .entity import Order, OrderItem, OrderStatus, PaymentStatus, PaymentOutcome, PaymentTransaction
from .repository import OrderRepository, PaymentTransactionRepository

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "PaymentOutcome",
    "PaymentTransaction",
    "OrderRepository",
    "PaymentTransactionRepository",
]
