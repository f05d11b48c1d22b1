"""Pricing: packaging calculator, tier discounts, shipping weight rules."""

from .packaging import LinePricing, compute, filler_pieces, round_money, total_pieces
from .discounts import DEFAULT_TIER_DISCOUNTS, TierDiscountResolver, load_tier_table
from .shipping import ShippingValidation, validate as validate_shipping

__all__ = [
    "LinePricing",
    "compute",
    "filler_pieces",
    "round_money",
    "total_pieces",
    "DEFAULT_TIER_DISCOUNTS",
    "TierDiscountResolver",
    "load_tier_table",
    "ShippingValidation",
    "validate_shipping",
]
