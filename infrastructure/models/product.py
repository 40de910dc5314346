"""
Product database model - only the columns pricing and settlement touch
"""
from sqlalchemy import Boolean, CheckConstraint, Column, Integer, Numeric, String, Text

from .base import Base, created_at_column, updated_at_column


class ProductModel(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, comment="Product name")
    description = Column(Text, nullable=True)
    price = Column(Numeric(precision=15, scale=2), nullable=False, comment="Current unit price")
    stock = Column(Integer, nullable=False, default=0, comment="Units available for sale")
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, stock={self.stock})>"
