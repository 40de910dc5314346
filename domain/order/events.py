"""
Order domain events.

Dataclass events record settlement facts for downstream handling
(logging today, messaging later). No infrastructure imports here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import uuid


@dataclass
class OrderEvent:
    order_id: str
    user_id: int
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class OrderPlaced(OrderEvent):
    final_amount: str = ""
    coupon_id: Optional[int] = None


@dataclass
class OrderPaymentSucceeded(OrderEvent):
    transaction_id: Optional[str] = None


@dataclass
class OrderPaymentFailed(OrderEvent):
    restored_items: int = 0
    restored_wallet_points: str = "0"
