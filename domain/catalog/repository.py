"""
Product catalog port - read for pricing and the shared stock counter
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable

from .entity import ProductPricing


class ProductCatalogRepository(ABC):

    @abstractmethod
    async def read_for_pricing(self, product_ids: Iterable[int]) -> Dict[int, ProductPricing]:
        """Current price/stock/active flag keyed by product id; unknown ids are absent"""
        pass

    @abstractmethod
    async def conditional_decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Decrement only while stock >= quantity. False when the row did not qualify."""
        pass

    @abstractmethod
    async def increment_stock(self, product_id: int, quantity: int) -> None:
        pass
