"""
Coupon database models - definitions and per-user usage counters
"""
from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String,
    UniqueConstraint,
)

from .base import Base, created_at_column, updated_at_column


class CouponModel(Base):
    __tablename__ = "coupons"
    __table_args__ = (
        CheckConstraint(
            "current_usage_count >= 0", name="ck_coupons_usage_non_negative"
        ),
        CheckConstraint(
            "discount_type IN ('PERCENTAGE', 'FIXED')", name="ck_coupons_discount_type"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True, comment="Coupon code")
    discount_type = Column(String(20), nullable=False, comment="PERCENTAGE/FIXED")
    discount_value = Column(Numeric(precision=15, scale=2), nullable=False)
    min_purchase = Column(Numeric(precision=15, scale=2), nullable=True, comment="Minimum subtotal")
    max_discount = Column(
        Numeric(precision=15, scale=2), nullable=True, comment="Cap for PERCENTAGE coupons"
    )
    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_to = Column(DateTime(timezone=True), nullable=False)
    total_usage_limit = Column(Integer, nullable=True, comment="NULL means unlimited")
    current_usage_count = Column(Integer, nullable=False, default=0)
    usage_limit_per_user = Column(Integer, nullable=True, comment="NULL means unlimited")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    def __repr__(self):
        return f"<Coupon(id={self.id}, code={self.code})>"


class UserCouponModel(Base):
    __tablename__ = "user_coupons"
    __table_args__ = (
        UniqueConstraint("user_id", "coupon_id", name="uq_user_coupons_user_coupon"),
        CheckConstraint("usage_count >= 0", name="ck_user_coupons_usage_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    coupon_id = Column(
        Integer, ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    usage_count = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
