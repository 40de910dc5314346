"""
Wallet store port
"""
from abc import ABC, abstractmethod
from decimal import Decimal


class WalletRepository(ABC):

    @abstractmethod
    async def read_balance(self, user_id: int) -> Decimal:
        """Current balance, 0 for users without a wallet row"""
        pass

    @abstractmethod
    async def conditional_debit(self, user_id: int, amount: Decimal) -> bool:
        """Debit only while balance >= amount. False when the row did not qualify."""
        pass

    @abstractmethod
    async def credit(self, user_id: int, amount: Decimal) -> None:
        pass
