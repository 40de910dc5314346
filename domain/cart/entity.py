"""
Cart snapshot - the priced view of a user's cart, read right before pricing or commit.

The engine never persists snapshots; the cart itself is owned by the cart service.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from domain.common.money import ensure_quantity


@dataclass(frozen=True)
class CartLine:
    """Raw cart row as the cart provider returns it"""
    product_id: int
    quantity: int


@dataclass(frozen=True)
class CartSnapshotLine:
    product_id: int
    unit_price: Decimal
    quantity: int
    product_active: bool
    available_stock: int
    name: Optional[str] = None

    def __post_init__(self):
        ensure_quantity(self.quantity)
        ensure_quantity(self.available_stock, field="available_stock")

    @property
    def line_total(self) -> Decimal:
        # Exact; rounding happens on the breakdown
        return self.unit_price * self.quantity


@dataclass
class CartSnapshot:
    user_id: int
    lines: List[CartSnapshotLine] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.lines

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))
