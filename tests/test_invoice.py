"""Tests for invoice materialization and rendering."""

import dataclasses
from datetime import date, timedelta
from decimal import Decimal

import pytest

from conftest import COBBLE, add_step
from stonecart.cart import AddItem, CartState, calculate
from stonecart.config import BusinessConfig
from stonecart.errors import EmptyCartError
from stonecart.invoice import InvoiceMaterializer, InvoiceNumberGenerator, format_invoice_text, render_invoice_html
from stonecart.parties import Buyer


@pytest.fixture
def buyer():
    return Buyer(
        name="Asha <Rao>",
        email="asha@example.com",
        phone="9876543210",
        address="12 Quarry Road",
        city="Delhi",
        state="Delhi",
        pincode="110001",
    )


@pytest.fixture
def reserved(aggregate, machine):
    aggregate.add_item(add_step())
    return machine.reserve()


@pytest.fixture
def materializer(config, clock):
    return InvoiceMaterializer(config, clock)


class TestMaterialize:
    def test_snapshot_contents(self, aggregate, reserved, materializer, buyer, clock):
        state, calc = aggregate.view()

        invoice = materializer.materialize(state, calc, reserved, buyer, order_id="ORD-9")

        assert invoice.issue_date == date(2025, 1, 15)
        assert invoice.due_date == date(2025, 1, 15) + timedelta(days=30)
        assert invoice.invoice_number.startswith("RRS-20250115-0001-")
        assert invoice.total_due == calc.final_total
        assert invoice.tax_amount == Decimal("0.00")
        assert invoice.reservation_expires_at == reserved.expires_at
        assert invoice.seller.name == "RR STONES"
        assert invoice.order_id == "ORD-9"
        assert not invoice.pickup_required

        line = invoice.lines[0]
        assert (line.total_pieces, line.filler_pieces) == (13, 7)
        assert line.filler_charges == Decimal("350.00")
        assert line.line_total == Decimal("1300.00")

    def test_does_not_mutate_cart(self, aggregate, reserved, materializer, buyer):
        state, calc = aggregate.view()
        before = state.to_dict()

        materializer.materialize(state, calc, reserved, buyer)

        assert aggregate.state.to_dict() == before

    def test_numbers_unique_per_attempt(self, aggregate, reserved, materializer, buyer):
        state, calc = aggregate.view()

        numbers = {materializer.materialize(state, calc, reserved, buyer).invoice_number for _ in range(20)}

        assert len(numbers) == 20

    def test_invoice_is_immutable(self, aggregate, reserved, materializer, buyer):
        state, calc = aggregate.view()
        invoice = materializer.materialize(state, calc, reserved, buyer)

        with pytest.raises(dataclasses.FrozenInstanceError):
            invoice.total_due = Decimal("0")
        with pytest.raises(dataclasses.FrozenInstanceError):
            invoice.lines[0].unit_price = Decimal("0")

    def test_later_cart_changes_do_not_leak(self, aggregate, machine, reserved, materializer, buyer):
        state, calc = aggregate.view()
        invoice = materializer.materialize(state, calc, reserved, buyer)

        machine.cancel()
        aggregate.add_item(add_step(product_ref=COBBLE))

        assert len(invoice.lines) == 1

    def test_flat_tax(self, aggregate, reserved, buyer, clock):
        materializer = InvoiceMaterializer(BusinessConfig(tax_rate=Decimal("0.18")), clock)
        state, calc = aggregate.view()

        invoice = materializer.materialize(state, calc, reserved, buyer)

        assert invoice.tax_amount == Decimal("318.60")
        assert invoice.total_due == Decimal("2088.60")

    def test_empty_cart(self, materializer, buyer, config):
        empty = CartState(owner_id="user-1")

        with pytest.raises(EmptyCartError):
            materializer.materialize(empty, calculate({}, None, config), None, buyer)

    def test_terms_mention_expiry_and_payment(self, aggregate, reserved, materializer, buyer):
        state, calc = aggregate.view()

        invoice = materializer.materialize(state, calc, reserved, buyer)

        assert any("held until 2025-01-15 10:05" in term for term in invoice.terms)
        assert any("within 30 days" in term for term in invoice.terms)
        assert any("50% of the unit price" in term for term in invoice.terms)


class TestInvoiceNumberGenerator:
    def test_format(self, clock):
        numbers = InvoiceNumberGenerator("INV", clock, start=7)

        number = numbers.next_number()

        prefix, day, seq, suffix = number.split("-")
        assert (prefix, day, seq) == ("INV", "20250115", "0007")
        assert len(suffix) == 6


class TestRender:
    def test_html_contents(self, aggregate, reserved, materializer, buyer):
        state, calc = aggregate.view()
        invoice = materializer.materialize(state, calc, reserved, buyer)

        html = render_invoice_html(invoice)

        assert invoice.invoice_number in html
        assert "2025-01-15" in html
        assert "2025-02-14" in html
        assert "Blue Mist Granite Step" in html
        assert "RR STONES" in html
        assert "₹1,300.00" in html
        assert "₹350.00" in html
        assert "₹1,770.00" in html
        assert "Delhi, Delhi 110001" in html

    def test_html_escapes_text(self, aggregate, machine, materializer, buyer):
        aggregate.add_item(AddItem("abc-1", 0, 1, 1, Decimal("5"), name="<script>alert(1)</script>"))
        machine.reserve()
        state, calc = aggregate.view()

        html = render_invoice_html(materializer.materialize(state, calc, machine.reservation, buyer))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Asha &lt;Rao&gt;" in html

    def test_discount_row(self, aggregate, reserved, materializer, buyer):
        state, calc = aggregate.view()
        invoice = materializer.materialize(state, calc, reserved, buyer)
        discounted = dataclasses.replace(
            invoice, totals=dataclasses.replace(calc, discount_percent=Decimal("20"), discount_amount=Decimal("260.00"))
        )

        assert "Discount (20%)" in render_invoice_html(discounted)

    def test_text_summary(self, aggregate, reserved, materializer, buyer):
        state, calc = aggregate.view()
        invoice = materializer.materialize(state, calc, reserved, buyer)

        text = format_invoice_text(invoice)

        assert invoice.invoice_number in text
        assert "13 pcs x Blue Mist Granite Step" in text
        assert "7 filler pcs" in text
        assert "TOTAL DUE:       ₹1,770.00" in text
