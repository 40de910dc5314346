"""
Shared business codes used across layers (Domain/Core/API).

This package exposes BusinessCode at `shared.codes`; every typed failure
the engine can raise has its own code so callers never parse messages.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Unified business status codes (single source of truth)."""

    # Success
    SUCCESS = 0

    # Parameter errors (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003

    # Business errors (2xxxx)
    BUSINESS_ERROR = 20000
    NOT_FOUND = 20006  # Generic resource not found

    # Cart / catalog (201xx)
    EMPTY_CART = 20101
    PRODUCT_UNAVAILABLE = 20102
    INSUFFICIENT_STOCK = 20103

    # Coupon (202xx)
    COUPON_NOT_FOUND = 20201
    COUPON_INACTIVE = 20202
    COUPON_EXPIRED = 20203
    MIN_PURCHASE_NOT_MET = 20204
    COUPON_USAGE_LIMIT_REACHED = 20205
    USER_COUPON_LIMIT_REACHED = 20206

    # Wallet (203xx)
    INSUFFICIENT_WALLET_BALANCE = 20301
    WALLET_EXCEEDS_PAYABLE = 20302

    # Order (204xx)
    ORDER_NOT_FOUND = 20401
    ALREADY_SETTLED = 20402

    # Authorization errors (3xxxx)
    PERMISSION_ERROR = 30000
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # System errors (4xxxx)
    SYSTEM_ERROR = 40000
    DATABASE_ERROR = 40001
    NETWORK_ERROR = 40002
    SERVICE_UNAVAILABLE = 40003
    SETTLEMENT_TIMEOUT = 40004


__all__ = ["BusinessCode"]
