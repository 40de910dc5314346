"""
Data transfer objects (DTO) - the contract between the application and API layers
"""
from pydantic import BaseModel, Field, field_validator, model_serializer, ConfigDict
from decimal import Decimal
from typing import Optional, List, Literal
from datetime import datetime, timezone

from core.config import settings


class DTOBase(BaseModel):
    """Base DTO: unify datetime serialization to UTC-Z for all subclasses."""

    @model_serializer(mode="wrap")
    def _serialize_model(self, handler):  # type: ignore[override]
        data = handler(self)

        def convert(value):
            if isinstance(value, datetime):
                ts = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
                s = ts.astimezone(timezone.utc).isoformat()
                return s.replace("+00:00", "Z")
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, tuple):
                return tuple(convert(v) for v in value)
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(data)


class CalculateOrderDTO(DTOBase):
    """Pricing inputs shared by preview and place order"""
    coupon_code: Optional[str] = Field(None, max_length=50, description="Coupon code to apply")
    use_wallet_points: bool = Field(False, description="Apply wallet points")
    wallet_points_to_use: Optional[Decimal] = Field(
        None,
        ge=0,
        decimal_places=2,
        description="Explicit points to use; omit to apply as many as possible",
    )

    @field_validator("coupon_code")
    def _normalize_code(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class PlaceOrderDTO(CalculateOrderDTO):
    """Place order request"""
    payment_method: Optional[str] = Field(None, max_length=50)


class UpdatePaymentStatusDTO(DTOBase):
    """Trusted payment outcome from the payment gateway"""
    payment_status: Literal["SUCCESS", "FAILED"]
    payment_method: Optional[str] = Field(None, max_length=50)
    transaction_id: Optional[str] = Field(None, max_length=100)


class PricedLineDTO(DTOBase):
    product_id: int
    name: Optional[str]
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class PriceBreakdownDTO(DTOBase):
    """Preview response"""
    subtotal: Decimal
    coupon_code: Optional[str] = None
    coupon_id: Optional[int] = None
    coupon_discount: Decimal
    wallet_points_available: Decimal
    wallet_points_used: Decimal
    final_amount: Decimal
    items: List[PricedLineDTO] = Field(default_factory=list)


class OrderItemDTO(DTOBase):
    product_id: int
    product_name: Optional[str]
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    model_config = ConfigDict(from_attributes=True)


class PaymentTransactionDTO(DTOBase):
    payment_status: str
    payment_method: Optional[str]
    transaction_id: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class OrderResponseDTO(DTOBase):
    """Order detail response"""
    id: str
    user_id: int
    total_amount: Decimal
    coupon_id: Optional[int]
    coupon_code: Optional[str]
    coupon_discount: Decimal
    wallet_points_used: Decimal
    final_amount: Decimal
    payment_status: str
    order_status: str
    items: List[OrderItemDTO] = Field(default_factory=list)
    transaction: Optional[PaymentTransactionDTO] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class PaginationParams(DTOBase):
    """Page/size pagination, with skip/limit derived"""
    page: int = Field(1, ge=1, description="Page number, starting at 1")
    size: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Page size",
    )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size
