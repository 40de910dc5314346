"""Pricing domain exports."""
from .calculator import PricingCalculator, PriceBreakdown, PricedLine, validate_cart
from .snapshot import load_cart_snapshot

__all__ = ["PricingCalculator", "PriceBreakdown", "PricedLine", "validate_cart", "load_cart_snapshot"]
