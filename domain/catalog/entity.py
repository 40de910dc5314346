"""
Product catalog view used for pricing. The catalog itself is managed elsewhere.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ProductPricing:
    product_id: int
    name: str
    unit_price: Decimal
    stock: int
    is_active: bool
