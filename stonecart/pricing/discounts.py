"""Customer tier discount resolution.

Business Rules:
1. Tier1 gets 20%, Tier2 15%, Tier3 10%
2. Guests and unknown tiers get no discount; an unknown tier is not an error
3. The discount applies to the pre-filler, pre-shipping subtotal
"""

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Mapping, Optional, Tuple

from ..errors import ConfigurationError
from .packaging import round_money

DEFAULT_TIER_DISCOUNTS = {
    "Tier1": Decimal("0.20"),
    "Tier2": Decimal("0.15"),
    "Tier3": Decimal("0.10"),
}


class TierDiscountResolver:
    """Maps a customer tier to a discount rate."""

    def __init__(self, table: Optional[Mapping[str, Decimal]] = None):
        table = DEFAULT_TIER_DISCOUNTS if table is None else table
        self._table = {name.strip().lower(): Decimal(rate) for name, rate in table.items()}

    def discount_rate_for(self, tier: Optional[str]) -> Decimal:
        if not tier:
            return Decimal("0")
        return self._table.get(tier.strip().lower(), Decimal("0"))

    def apply(self, subtotal: Decimal, tier: Optional[str]) -> Tuple[Decimal, Decimal]:
        """Return (discount_percent, discount_amount) for a subtotal."""
        rate = self.discount_rate_for(tier)
        percent = rate * 100
        if percent == percent.to_integral_value():
            percent = percent.quantize(Decimal(1))
        return percent, round_money(subtotal * rate)


def load_tier_table(path) -> Mapping[str, Decimal]:
    """Load a tier table from a static JSON file.

    Accepts fractions (`{"Tier1": 0.2}`) or whole percentages
    (`{"Tier1": 20}`), optionally nested under a "tiers" key.
    """
    try:
        raw = json.loads(Path(path).read_text())
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read tier table {path}", cause=e) from e

    if isinstance(raw, dict) and isinstance(raw.get("tiers"), dict):
        raw = raw["tiers"]
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Tier table {path} must be a JSON object")

    table = {}
    for tier, value in raw.items():
        try:
            rate = Decimal(str(value))
        except InvalidOperation as e:
            raise ConfigurationError(f"Invalid discount for {tier}: {value!r}") from e
        if rate >= 1:
            rate = rate / 100
        table[tier] = rate
    return table
