"""Business configuration for pricing, shipping, reservations and invoicing.

Values are read-only once constructed and safe to share between carts.
`BusinessConfig.from_env()` reads overrides from STONECART_* environment
variables, falling back to the storefront defaults.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import ConfigurationError
from .parties import Party
from .pricing.discounts import DEFAULT_TIER_DISCOUNTS, load_tier_table
from .validation import require_fraction

ENV_PREFIX = "STONECART_"

DEFAULT_SELLER = Party(
    name="RR STONES",
    email="info@rrstones.com",
    phone="+91 9876543210",
    address="123 Business Park, Granite Street",
    city="Mumbai, Maharashtra 400001",
    tax_id="GST123456789",
)


@dataclass(frozen=True)
class BusinessConfig:
    """Storefront business rules.

    filler_rate: fraction of the unit price billed per filler piece.
    max_shipping_weight: lbs; orders above it are pickup-only.
    weight_warning_ratio: share of max weight above which an advisory is shown.
    shipping_fee: flat fee charged when shipping is allowed.
    """

    filler_rate: Decimal = Decimal("0.5")
    max_shipping_weight: Decimal = Decimal("48000")
    weight_warning_ratio: Decimal = Decimal("0.8")
    shipping_fee: Decimal = Decimal("120")
    tier_discounts: Mapping[str, Decimal] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_TIER_DISCOUNTS))
    )
    reservation_minutes: int = 5
    invoice_term_days: int = 30
    invoice_prefix: str = "RRS"
    tax_rate: Decimal = Decimal("0")
    seller: Party = DEFAULT_SELLER

    def __post_init__(self) -> None:
        require_fraction(self.filler_rate, "filler_rate")
        require_fraction(self.weight_warning_ratio, "weight_warning_ratio")
        require_fraction(self.tax_rate, "tax_rate")
        tiers = {tier: Decimal(str(rate)) for tier, rate in self.tier_discounts.items()}
        for tier, rate in tiers.items():
            require_fraction(rate, f"tier_discounts[{tier}]", upper_inclusive=False)
        object.__setattr__(self, "tier_discounts", MappingProxyType(tiers))
        if self.max_shipping_weight <= 0:
            raise ConfigurationError("max_shipping_weight must be positive")
        if self.shipping_fee < 0:
            raise ConfigurationError("shipping_fee cannot be negative")
        if self.reservation_minutes <= 0:
            raise ConfigurationError("reservation_minutes must be positive")
        if self.invoice_term_days < 0:
            raise ConfigurationError("invoice_term_days cannot be negative")
        if not self.invoice_prefix:
            raise ConfigurationError("invoice_prefix is required")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BusinessConfig":
        """Build a config from STONECART_* variables."""
        env = os.environ if environ is None else environ
        kwargs = {}

        for name in ("filler_rate", "max_shipping_weight", "weight_warning_ratio", "shipping_fee", "tax_rate"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None:
                kwargs[name] = _parse_decimal(name, raw)

        for name in ("reservation_minutes", "invoice_term_days"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None:
                kwargs[name] = _parse_int(name, raw)

        prefix = env.get(ENV_PREFIX + "INVOICE_PREFIX")
        if prefix is not None:
            kwargs["invoice_prefix"] = prefix

        tier_table = env.get(ENV_PREFIX + "TIER_TABLE")
        if tier_table:
            kwargs["tier_discounts"] = load_tier_table(tier_table)

        return cls(**kwargs)


def _parse_decimal(name: str, raw: str) -> Decimal:
    try:
        return Decimal(raw.strip())
    except InvalidOperation as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name.upper()} is not a number: {raw!r}") from e


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name.upper()} is not an integer: {raw!r}") from e
