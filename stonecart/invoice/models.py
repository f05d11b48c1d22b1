"""Immutable pro-forma invoice snapshot."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..cart.calculation import BusinessCalculation, PricedLine
from ..parties import Buyer, Party


@dataclass(frozen=True)
class InvoiceLine:
    product_ref: str
    name: str
    crate_qty: int
    piece_qty: int
    pieces_per_crate: int
    total_pieces: int
    total_crates: int
    filler_pieces: int
    unit_price: Decimal
    filler_charges: Decimal
    weight: Decimal
    line_total: Decimal

    @classmethod
    def from_priced(cls, priced: PricedLine) -> "InvoiceLine":
        item, pricing = priced
        return cls(
            product_ref=item.product_ref,
            name=item.name or item.product_ref,
            crate_qty=item.crate_qty,
            piece_qty=item.piece_qty,
            pieces_per_crate=item.pieces_per_crate,
            total_pieces=pricing.total_pieces,
            total_crates=pricing.total_crates,
            filler_pieces=pricing.filler_pieces,
            unit_price=item.unit_price,
            filler_charges=pricing.filler_charges,
            weight=pricing.weight,
            line_total=pricing.subtotal,
        )


@dataclass(frozen=True)
class Invoice:
    invoice_number: str
    cart_id: str
    issue_date: date
    due_date: date
    lines: Tuple[InvoiceLine, ...]
    totals: BusinessCalculation
    tax_rate: Decimal
    tax_amount: Decimal
    total_due: Decimal
    buyer: Buyer
    seller: Party
    reservation_expires_at: Optional[datetime]
    terms: Tuple[str, ...]
    order_id: Optional[str] = None
    pickup_required: bool = False

    @property
    def shipping_message(self) -> Optional[str]:
        return self.totals.shipping.message
