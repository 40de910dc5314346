"""Product catalog domain exports."""
from .entity import ProductPricing
from .repository import ProductCatalogRepository

__all__ = ["ProductPricing", "ProductCatalogRepository"]
