"""Domain business exceptions, shared by the domain and infrastructure layers.

The core layer only maps these to HTTP responses; the domain never imports core.

Failures fall into four families a caller can branch on:

- ``ResourceExhaustedException``: a shared counter (stock, wallet, coupon quota)
  cannot cover the order. Safe to show verbatim, never retried automatically.
- ``NotEligibleException``: the coupon does not apply; the user can fix the input.
- ``StateConflictException``: a duplicate or out-of-order payment callback.
- ``TransientException``: timeout or store outage; the whole call may be retried.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """Base business exception"""

    retryable: bool = False

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class ResourceExhaustedException(BusinessException):
    pass


class NotEligibleException(BusinessException):
    pass


class StateConflictException(BusinessException):
    pass


class TransientException(BusinessException):
    retryable = True


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )


# ---------------------------------------------------------------------------
# Cart / catalog
# ---------------------------------------------------------------------------

class EmptyCartException(BusinessException):
    def __init__(self):
        super().__init__(
            code=BusinessCode.EMPTY_CART,
            message="Cart is empty",
            error_type="EmptyCart",
        )


class ProductUnavailableException(BusinessException):
    def __init__(self, product_id: int, name: Optional[str] = None):
        super().__init__(
            code=BusinessCode.PRODUCT_UNAVAILABLE,
            message=f'Product "{name or product_id}" is no longer available',
            error_type="ProductUnavailable",
            details={"product_id": product_id},
        )


class InsufficientStockException(ResourceExhaustedException):
    def __init__(self, product_id: int, requested: int, available: Optional[int] = None):
        details = {"product_id": product_id, "requested": requested}
        if available is not None:
            details["available"] = available
            message = f"Only {available} units of product {product_id} available in stock"
        else:
            message = f"Insufficient stock for product {product_id}"
        super().__init__(
            code=BusinessCode.INSUFFICIENT_STOCK,
            message=message,
            error_type="InsufficientStock",
            details=details,
        )


# ---------------------------------------------------------------------------
# Coupon
# ---------------------------------------------------------------------------

class CouponNotFoundException(NotEligibleException):
    def __init__(self, code: str):
        super().__init__(
            code=BusinessCode.COUPON_NOT_FOUND,
            message="Invalid coupon code",
            error_type="CouponNotFound",
            details={"coupon_code": code},
            field="coupon_code",
        )


class CouponInactiveException(NotEligibleException):
    def __init__(self, code: str):
        super().__init__(
            code=BusinessCode.COUPON_INACTIVE,
            message="This coupon is no longer active",
            error_type="CouponInactive",
            details={"coupon_code": code},
            field="coupon_code",
        )


class CouponExpiredException(NotEligibleException):
    def __init__(self, code: str):
        super().__init__(
            code=BusinessCode.COUPON_EXPIRED,
            message="This coupon has expired or is not yet valid",
            error_type="CouponExpired",
            details={"coupon_code": code},
            field="coupon_code",
        )


class MinPurchaseNotMetException(NotEligibleException):
    def __init__(self, code: str, min_purchase: Decimal, subtotal: Decimal):
        super().__init__(
            code=BusinessCode.MIN_PURCHASE_NOT_MET,
            message=f"Minimum purchase of {min_purchase} required to use this coupon",
            error_type="MinPurchaseNotMet",
            details={
                "coupon_code": code,
                "min_purchase": str(min_purchase),
                "subtotal": str(subtotal),
            },
            field="coupon_code",
        )


class CouponUsageLimitReachedException(ResourceExhaustedException):
    def __init__(self, code: str):
        super().__init__(
            code=BusinessCode.COUPON_USAGE_LIMIT_REACHED,
            message="This coupon has reached its usage limit",
            error_type="CouponUsageLimitReached",
            details={"coupon_code": code},
            field="coupon_code",
        )


class UserCouponLimitReachedException(ResourceExhaustedException):
    def __init__(self, code: str):
        super().__init__(
            code=BusinessCode.USER_COUPON_LIMIT_REACHED,
            message="You have reached the usage limit for this coupon",
            error_type="UserCouponLimitReached",
            details={"coupon_code": code},
            field="coupon_code",
        )


# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------

class InsufficientWalletBalanceException(ResourceExhaustedException):
    def __init__(self, requested: Decimal, available: Optional[Decimal] = None):
        details = {"requested": str(requested)}
        if available is not None:
            details["available"] = str(available)
            message = f"Insufficient wallet points. You have {available} available"
        else:
            message = "Insufficient wallet points"
        super().__init__(
            code=BusinessCode.INSUFFICIENT_WALLET_BALANCE,
            message=message,
            error_type="InsufficientWalletBalance",
            details=details,
            field="wallet_points_to_use",
        )


class WalletExceedsPayableException(BusinessException):
    def __init__(self, requested: Decimal, payable: Decimal):
        super().__init__(
            code=BusinessCode.WALLET_EXCEEDS_PAYABLE,
            message=f"Cannot use more than {payable} wallet points for this order",
            error_type="WalletExceedsPayable",
            details={"requested": str(requested), "payable": str(payable)},
            field="wallet_points_to_use",
        )


# ---------------------------------------------------------------------------
# Order settlement
# ---------------------------------------------------------------------------

class OrderNotFoundException(BusinessException):
    def __init__(self, order_id: str):
        super().__init__(
            code=BusinessCode.ORDER_NOT_FOUND,
            message="Order not found",
            error_type="OrderNotFound",
            details={"order_id": order_id},
        )


class AlreadySettledException(StateConflictException):
    def __init__(self, order_id: str, payment_status: str):
        super().__init__(
            code=BusinessCode.ALREADY_SETTLED,
            message="Payment has already been settled for this order",
            error_type="AlreadySettled",
            details={"order_id": order_id, "payment_status": payment_status},
        )


class SettlementTimeoutException(TransientException):
    def __init__(self, operation: str, timeout: float):
        super().__init__(
            code=BusinessCode.SETTLEMENT_TIMEOUT,
            message=f"{operation} did not finish within {timeout}s, please retry",
            error_type="SettlementTimeout",
            details={"operation": operation, "timeout_seconds": timeout},
        )


class StoreUnavailableException(TransientException):
    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            code=BusinessCode.SERVICE_UNAVAILABLE,
            message="Order store temporarily unavailable, please retry",
            error_type="StoreUnavailable",
            details={"reason": reason} if reason else None,
        )
