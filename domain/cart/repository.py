"""
Cart provider port
"""
from abc import ABC, abstractmethod
from typing import List

from .entity import CartLine


class CartRepository(ABC):

    @abstractmethod
    async def get_cart_lines(self, user_id: int) -> List[CartLine]:
        """Cart rows in insertion order"""
        pass

    @abstractmethod
    async def clear_cart(self, user_id: int) -> int:
        """Remove every cart row of the user, returns removed count"""
        pass
