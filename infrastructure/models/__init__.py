"""Infrastructure models package exports."""
from .base import Base, metadata
from .product import ProductModel
from .cart import CartItemModel
from .wallet import WalletModel
from .coupon import CouponModel, UserCouponModel
from .order import OrderModel, OrderItemModel, PaymentTransactionModel

__all__ = [
    "Base",
    "metadata",
    "ProductModel",
    "CartItemModel",
    "WalletModel",
    "CouponModel",
    "UserCouponModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentTransactionModel",
]
