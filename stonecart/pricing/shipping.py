"""Shipping weight validation.

Stateless: re-run against the current aggregate weight after every quantity
change.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

DEFAULT_MAX_WEIGHT = Decimal("48000")
DEFAULT_WARNING_RATIO = Decimal("0.8")


@dataclass(frozen=True)
class ShippingValidation:
    allow_shipping: bool
    exceeds_limit: bool
    force_pickup: bool
    warning: bool
    message: Optional[str]


def format_weight(weight: Decimal) -> str:
    return f"{weight:,.0f} lbs" if weight == weight.to_integral_value() else f"{weight:,.2f} lbs"


def validate(
    total_weight: Decimal,
    max_weight: Decimal = DEFAULT_MAX_WEIGHT,
    warning_ratio: Decimal = DEFAULT_WARNING_RATIO,
) -> ShippingValidation:
    total_weight = Decimal(total_weight)
    max_weight = Decimal(max_weight)

    if total_weight > max_weight:
        return ShippingValidation(
            allow_shipping=False,
            exceeds_limit=True,
            force_pickup=True,
            warning=False,
            message=(
                f"Your order weighs {format_weight(total_weight)}, exceeding the "
                f"{format_weight(max_weight)} shipping limit. Pickup will be required."
            ),
        )

    if total_weight > max_weight * Decimal(warning_ratio):
        return ShippingValidation(
            allow_shipping=True,
            exceeds_limit=False,
            force_pickup=False,
            warning=True,
            message=(
                f"Your order weighs {format_weight(total_weight)}. "
                f"Consider pickup for orders over {format_weight(max_weight)}."
            ),
        )

    return ShippingValidation(
        allow_shipping=True,
        exceeds_limit=False,
        force_pickup=False,
        warning=False,
        message=None,
    )
