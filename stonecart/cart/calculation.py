"""Full business recomputation over a cart's line items.

Recomputed from scratch after every item change; nothing here is cached or
updated incrementally.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, NamedTuple, Optional, Tuple

from ..config import BusinessConfig
from ..pricing.discounts import TierDiscountResolver
from ..pricing.packaging import LinePricing, compute, round_money
from ..pricing.shipping import ShippingValidation, validate
from .state import LineItem

ZERO = Decimal("0")


class PricedLine(NamedTuple):
    item: LineItem
    pricing: LinePricing


@dataclass(frozen=True)
class BusinessCalculation:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total_filler_charges: Decimal
    total_weight: Decimal
    shipping_fee: Decimal
    final_total: Decimal
    tier: Optional[str]
    shipping: ShippingValidation
    lines: Tuple[PricedLine, ...] = ()

    @property
    def total_pieces(self) -> int:
        return sum(line.pricing.total_pieces for line in self.lines)

    @property
    def total_filler_pieces(self) -> int:
        return sum(line.pricing.filler_pieces for line in self.lines)

    @classmethod
    def empty(cls, config: Optional[BusinessConfig] = None, tier: Optional[str] = None) -> "BusinessCalculation":
        return calculate({}, tier, config)


def price_line(item: LineItem, config: BusinessConfig) -> LinePricing:
    return compute(
        item.crate_qty,
        item.piece_qty,
        item.pieces_per_crate,
        item.unit_price,
        item.weight_per_piece,
        config.filler_rate,
    )


def calculate(
    items: Mapping[str, LineItem],
    tier: Optional[str],
    config: Optional[BusinessConfig] = None,
) -> BusinessCalculation:
    """Recompute subtotal, discount, filler charges, weight and shipping.

    final_total = subtotal - discount + filler charges + shipping fee.
    The shipping fee is zero for an empty cart and for orders over the
    weight limit.
    """
    config = config or BusinessConfig()

    lines = tuple(PricedLine(item, price_line(item, config)) for item in items.values())

    subtotal = sum((line.pricing.subtotal for line in lines), ZERO)
    filler_charges = sum((line.pricing.filler_charges for line in lines), ZERO)
    total_weight = sum((line.pricing.weight for line in lines), ZERO)

    resolver = TierDiscountResolver(config.tier_discounts)
    discount_percent, discount_amount = resolver.apply(subtotal, tier)

    shipping = validate(total_weight, config.max_shipping_weight, config.weight_warning_ratio)
    shipping_fee = config.shipping_fee if lines and shipping.allow_shipping else ZERO

    return BusinessCalculation(
        subtotal=round_money(subtotal),
        discount_percent=discount_percent,
        discount_amount=discount_amount,
        total_filler_charges=round_money(filler_charges),
        total_weight=total_weight,
        shipping_fee=round_money(Decimal(shipping_fee)),
        final_total=round_money(subtotal - discount_amount + filler_charges + shipping_fee),
        tier=tier,
        shipping=shipping,
        lines=lines,
    )
