"""
Order domain entities - the order aggregate root, its items and payment transaction
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from domain.common.exceptions import DomainValidationException
from domain.common.money import ZERO


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentOutcome(str, Enum):
    """Trusted payment signal accepted by reconcile"""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    """Immutable line snapshot; unit_price is the price read at commit time"""
    product_id: int
    quantity: int
    unit_price: Decimal
    product_name: Optional[str] = None
    id: Optional[int] = None
    order_id: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class PaymentTransaction:
    order_id: str
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Order:
    """
    Order aggregate root

    Business rules:
    1. final_amount = max(0, total_amount - coupon_discount - wallet_points_used)
    2. coupon_discount <= total_amount
    3. wallet_points_used <= total_amount - coupon_discount
    4. Created PENDING/PENDING; leaves PENDING exactly once, to
       SUCCESS/CONFIRMED or FAILED/CANCELLED
    """

    id: Optional[str]
    user_id: int
    total_amount: Decimal
    coupon_discount: Decimal
    wallet_points_used: Decimal
    final_amount: Decimal
    coupon_id: Optional[int] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    order_status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItem] = field(default_factory=list)
    transaction: Optional[PaymentTransaction] = None
    coupon_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.payment_status = PaymentStatus(self.payment_status)
        self.order_status = OrderStatus(self.order_status)
        self._validate_amounts()
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    def _validate_amounts(self) -> None:
        for name in ("total_amount", "coupon_discount", "wallet_points_used", "final_amount"):
            if getattr(self, name) < 0:
                raise DomainValidationException(f"{name} cannot be negative", field=name)
        if self.coupon_discount > self.total_amount:
            raise DomainValidationException(
                f"Coupon discount {self.coupon_discount} exceeds total {self.total_amount}",
                field="coupon_discount",
            )
        if self.wallet_points_used > self.total_amount - self.coupon_discount:
            raise DomainValidationException(
                f"Wallet points {self.wallet_points_used} exceed payable amount",
                field="wallet_points_used",
            )
        expected = max(self.total_amount - self.coupon_discount - self.wallet_points_used, ZERO)
        if self.final_amount != expected:
            raise DomainValidationException(
                f"Final amount {self.final_amount} does not match {expected}",
                field="final_amount",
            )

    def is_pending(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING

    def mark_paid(self) -> None:
        if not self.is_pending():
            raise DomainValidationException(
                f"Cannot move payment from {self.payment_status.value} to SUCCESS",
                field="payment_status",
            )
        self.payment_status = PaymentStatus.SUCCESS
        self.order_status = OrderStatus.CONFIRMED
        self.updated_at = datetime.now(timezone.utc)

    def mark_failed(self) -> None:
        if not self.is_pending():
            raise DomainValidationException(
                f"Cannot move payment from {self.payment_status.value} to FAILED",
                field="payment_status",
            )
        self.payment_status = PaymentStatus.FAILED
        self.order_status = OrderStatus.CANCELLED
        self.updated_at = datetime.now(timezone.utc)
