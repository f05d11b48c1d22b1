"""Tests for the checkout reservation state machine."""

from datetime import timedelta
from decimal import Decimal

import pytest

from conftest import add_step
from stonecart.cart import CartStatus
from stonecart.errors import (
    AuthenticationRequired,
    CartLockedError,
    EmptyCartError,
    ReservationExpiredError,
    ValidationError,
)
from stonecart.parties import Buyer


@pytest.fixture
def buyer():
    return Buyer(name="Asha Rao", email="asha@example.com")


class TestReserve:
    def test_reserve_locks_cart(self, aggregate, machine, clock):
        aggregate.add_item(add_step())

        reservation = machine.reserve()

        assert machine.status == CartStatus.RESERVED
        assert reservation.expires_at == clock() + timedelta(minutes=5)
        assert aggregate.state.reserved_until == reservation.expires_at
        assert machine.seconds_remaining == 300

    def test_reserve_empty_cart(self, machine):
        with pytest.raises(EmptyCartError):
            machine.reserve()

    def test_reserve_requires_identity(self, identity_provider, machine):
        identity_provider.logout()

        with pytest.raises(AuthenticationRequired):
            machine.reserve()

    def test_custom_timeout(self, aggregate, machine):
        aggregate.add_item(add_step())

        reservation = machine.reserve(timeout_minutes=10)

        assert reservation.timeout_minutes == 10

    def test_non_positive_timeout_rejected(self, aggregate, machine):
        aggregate.add_item(add_step())

        with pytest.raises(ValidationError, match="timeout must be positive"):
            machine.reserve(timeout_minutes=0)
        assert machine.status == CartStatus.ACTIVE

    def test_reserve_again_refreshes_timer(self, aggregate, machine, clock):
        aggregate.add_item(add_step())
        machine.reserve()
        clock.advance(minutes=4)

        reservation = machine.reserve()

        assert reservation.expires_at == clock() + timedelta(minutes=5)
        assert machine.seconds_remaining == 300

    def test_reserve_after_expiry_refreshes(self, aggregate, machine, clock):
        aggregate.add_item(add_step())
        machine.reserve()
        clock.advance(minutes=7)

        machine.reserve()

        assert not machine.is_reservation_expired

    def test_explicit_expiry_from_inventory(self, aggregate, machine, clock):
        aggregate.add_item(add_step())
        expires_at = clock() + timedelta(minutes=3)

        reservation = machine.reserve(expires_at=expires_at)

        assert reservation.expires_at == expires_at


class TestExpiry:
    def test_expiry_is_passive(self, aggregate, machine, clock, buyer):
        aggregate.add_item(add_step())
        machine.reserve(timeout_minutes=5)
        clock.advance(minutes=5, seconds=1)

        assert machine.seconds_remaining == 0
        assert machine.is_reservation_expired
        assert machine.status == CartStatus.RESERVED
        with pytest.raises(ReservationExpiredError):
            machine.complete_checkout(buyer)

    def test_cancel_after_expiry_unlocks(self, aggregate, machine, clock):
        aggregate.add_item(add_step())
        machine.reserve()
        clock.advance(minutes=6)

        assert machine.cancel() is True
        assert machine.status == CartStatus.ACTIVE
        assert aggregate.state.reserved_until is None
        aggregate.clear()

    def test_expired_cart_stays_locked_until_cancelled(self, aggregate, machine, clock):
        aggregate.add_item(add_step())
        machine.reserve()
        clock.advance(minutes=6)

        with pytest.raises(CartLockedError):
            aggregate.clear()


class TestCancel:
    def test_cancel_is_idempotent(self, aggregate, machine):
        aggregate.add_item(add_step())
        machine.reserve()

        assert machine.cancel() is True
        assert machine.cancel() is False
        assert machine.status == CartStatus.ACTIVE

    def test_cancel_without_reservation(self, machine):
        assert machine.cancel() is False


class TestCompleteCheckout:
    def test_complete_from_active_cart(self, aggregate, machine, buyer):
        aggregate.add_item(add_step())

        with pytest.raises(ReservationExpiredError, match="not reserved"):
            machine.complete_checkout(buyer)

    def test_complete_produces_invoice_and_resets(self, aggregate, machine, buyer):
        aggregate.add_item(add_step())
        machine.reserve()

        invoice = machine.complete_checkout(buyer, order_id="ORD-1")

        assert invoice.order_id == "ORD-1"
        assert invoice.total_due == Decimal("1770.00")
        assert invoice.lines[0].total_pieces == 13
        assert aggregate.state.items == {}
        assert aggregate.state.status == CartStatus.ACTIVE
        assert aggregate.state.owner_id == "user-1"

    def test_over_limit_requires_pickup_acknowledgment(self, aggregate, machine, buyer):
        aggregate.add_item(add_step(121, 0))
        machine.reserve()

        with pytest.raises(ValidationError, match="pickup must be acknowledged") as exc:
            machine.complete_checkout(buyer)
        assert exc.value.field == "pickup_acknowledged"
        assert machine.status == CartStatus.RESERVED

        invoice = machine.complete_checkout(buyer, pickup_acknowledged=True)

        assert invoice.pickup_required
        assert invoice.totals.shipping_fee == Decimal("0.00")

    def test_finalize_keeps_a_reservation_that_lapsed_after_checking(self, aggregate, machine, clock, buyer):
        aggregate.add_item(add_step())
        machine.reserve()
        reservation = machine.ensure_completable()
        clock.advance(minutes=6)

        invoice = machine.finalize(reservation, buyer, order_id="ORD-2")

        assert invoice.order_id == "ORD-2"
        assert invoice.reservation_expires_at == reservation.expires_at
        assert aggregate.state.items == {}
        assert aggregate.state.status == CartStatus.ACTIVE

    def test_ensure_completable_returns_live_reservation(self, aggregate, machine):
        aggregate.add_item(add_step())
        reserved = machine.reserve()

        assert machine.ensure_completable() == reserved
