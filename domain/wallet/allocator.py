"""
Wallet allocator - decides how many wallet points an order consumes.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from domain.common.exceptions import (
    InsufficientWalletBalanceException,
    WalletExceedsPayableException,
)
from domain.common.money import ZERO, ensure_non_negative, to_decimal


class WalletAllocator:
    """
    Rules:
    1. Wallet not requested -> nothing is applied
    2. Explicit amount -> must be covered by the balance and must not exceed the payable amount
    3. No explicit amount -> apply as much as is useful: min(balance, payable)
    """

    def allocate(
        self,
        available: Decimal,
        payable: Decimal,
        use_wallet: bool,
        requested: Optional[Decimal] = None,
    ) -> Decimal:
        if not use_wallet:
            return ZERO

        available = max(to_decimal(available), ZERO)
        payable = max(to_decimal(payable), ZERO)

        if requested is not None:
            requested = ensure_non_negative(requested, field="wallet_points_to_use")
            if requested > available:
                raise InsufficientWalletBalanceException(requested, available)
            if requested > payable:
                raise WalletExceedsPayableException(requested, payable)
            return requested

        return min(available, payable)
