"""Invoice materialization from a locked cart."""

import itertools
import secrets
from datetime import timedelta
from typing import Optional

from ..cart.calculation import BusinessCalculation
from ..cart.state import CartState
from ..clock import Clock, utc_now
from ..config import BusinessConfig
from ..errors import EmptyCartError
from ..identity import cart_root
from ..log import get_logger
from ..parties import Buyer
from ..pricing.packaging import round_money
from .models import Invoice, InvoiceLine


class InvoiceNumberGenerator:
    """Produces `{prefix}-{YYYYMMDD}-{sequence:04d}-{random}` numbers.

    The sequence is per process; the random suffix keeps numbers unique
    across processes sharing a prefix.
    """

    def __init__(self, prefix: str, clock: Clock = utc_now, start: int = 1):
        self.prefix = prefix
        self.clock = clock
        self._sequence = itertools.count(start)

    def next_number(self) -> str:
        return f"{self.prefix}-{self.clock():%Y%m%d}-{next(self._sequence):04d}-{secrets.token_hex(3)}"


class InvoiceMaterializer:
    def __init__(self, config: Optional[BusinessConfig] = None, clock: Clock = utc_now, numbers: Optional[InvoiceNumberGenerator] = None):
        self.config = config or BusinessConfig()
        self.clock = clock
        self.numbers = numbers or InvoiceNumberGenerator(self.config.invoice_prefix, clock)
        self.log = get_logger(domain="invoice")

    def materialize(
        self,
        cart_state: CartState,
        calculation: BusinessCalculation,
        reservation,
        buyer: Buyer,
        order_id: Optional[str] = None,
    ) -> Invoice:
        """Snapshot the cart into an Invoice. Never mutates the cart."""
        if cart_state.is_empty():
            raise EmptyCartError()

        issue_date = self.clock().date()
        due_date = issue_date + timedelta(days=self.config.invoice_term_days)
        tax_amount = round_money(calculation.final_total * self.config.tax_rate)
        expires_at = reservation.expires_at if reservation is not None else cart_state.reserved_until
        pickup_required = calculation.shipping.force_pickup

        invoice = Invoice(
            invoice_number=self.numbers.next_number(),
            cart_id=str(cart_root(cart_state.owner_id)),
            issue_date=issue_date,
            due_date=due_date,
            lines=tuple(InvoiceLine.from_priced(priced) for priced in calculation.lines),
            totals=calculation,
            tax_rate=self.config.tax_rate,
            tax_amount=tax_amount,
            total_due=calculation.final_total + tax_amount,
            buyer=buyer,
            seller=self.config.seller,
            reservation_expires_at=expires_at,
            terms=self._terms(expires_at, pickup_required),
            order_id=order_id,
            pickup_required=pickup_required,
        )

        self.log.info(
            "invoice_materialized",
            invoice_number=invoice.invoice_number,
            cart_id=invoice.cart_id,
            total_due=str(invoice.total_due),
            line_count=len(invoice.lines),
        )
        return invoice

    def _terms(self, expires_at, pickup_required: bool) -> tuple:
        terms = []
        if expires_at is not None:
            terms.append(f"Prices and stock are held until {expires_at:%Y-%m-%d %H:%M %Z}".rstrip())
        terms.append(f"Payment is due within {self.config.invoice_term_days} days of invoice date")
        if self.config.filler_rate:
            percent = (self.config.filler_rate * 100).normalize()
            terms.append(f"Filler pieces completing a partial crate are billed at {percent:f}% of the unit price")
        if pickup_required:
            terms.append("This order exceeds the shipping weight limit and must be collected by the buyer")
        terms.append(f"All materials remain property of {self.config.seller.name} until payment is received in full")
        return tuple(terms)
