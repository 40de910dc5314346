"""
Order database models - orders, item snapshots and payment transactions
Note: these are persistence details; business rules live in domain.order.entity
"""
from sqlalchemy import (
    CheckConstraint, Column, ForeignKey, Index, Integer, Numeric, String,
)
from sqlalchemy.orm import relationship

from .base import Base, created_at_column, updated_at_column


class OrderModel(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
        CheckConstraint("coupon_discount >= 0", name="ck_orders_discount_non_negative"),
        CheckConstraint("wallet_points_used >= 0", name="ck_orders_wallet_non_negative"),
        CheckConstraint("final_amount >= 0", name="ck_orders_final_non_negative"),
        Index("ix_orders_user_created", "user_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, comment="Order UUID")
    user_id = Column(Integer, nullable=False, index=True)

    total_amount = Column(Numeric(precision=15, scale=2), nullable=False, comment="Subtotal")
    coupon_discount = Column(Numeric(precision=15, scale=2), nullable=False, default=0)
    wallet_points_used = Column(Numeric(precision=15, scale=2), nullable=False, default=0)
    final_amount = Column(Numeric(precision=15, scale=2), nullable=False, comment="Amount to pay")
    coupon_id = Column(Integer, ForeignKey("coupons.id"), nullable=True)

    payment_status = Column(
        String(20), nullable=False, default="PENDING", index=True,
        comment="PENDING/SUCCESS/FAILED/REFUNDED",
    )
    order_status = Column(
        String(20), nullable=False, default="PENDING", index=True,
        comment="PENDING/CONFIRMED/PROCESSING/SHIPPED/DELIVERED/CANCELLED",
    )

    created_at = created_at_column()
    updated_at = updated_at_column()

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
    coupon = relationship("CouponModel", lazy="selectin")
    transaction = relationship(
        "PaymentTransactionModel", back_populates="order", lazy="selectin", uselist=False
    )

    def __repr__(self):
        return f"<Order(id={self.id}, payment_status={self.payment_status})>"


class OrderItemModel(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    product_name = Column(String(255), nullable=True, comment="Name at order time")
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(precision=15, scale=2), nullable=False, comment="Price at order time")

    order = relationship("OrderModel", back_populates="items")


class PaymentTransactionModel(Base):
    __tablename__ = "payment_transactions"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"),
        unique=True, nullable=False, index=True,
    )
    payment_status = Column(String(20), nullable=False, default="PENDING")
    payment_method = Column(String(50), nullable=True)
    transaction_id = Column(String(100), nullable=True, index=True, comment="Gateway reference")

    created_at = created_at_column()
    updated_at = updated_at_column()

    order = relationship("OrderModel", back_populates="transaction")
