"""Checkout reservation state machine.

States: active -> reserved -> checked_out -> (reset) active.

A reservation that runs out is only flagged as expired. Nothing is released
automatically; the caller cancels and reserves again.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from ..cart.aggregate import CartAggregate
from ..cart.state import CartState, CartStatus
from ..clock import Clock, utc_now
from ..config import BusinessConfig
from ..errors import AuthenticationRequired, EmptyCartError, ReservationExpiredError, ValidationError, errmsg
from ..identity import cart_root
from ..invoice.materializer import InvoiceMaterializer
from ..invoice.models import Invoice
from ..log import get_logger
from ..parties import Buyer
from ..validation import require_positive


@dataclass(frozen=True)
class Reservation:
    cart_id: str
    started_at: datetime
    expires_at: datetime

    @property
    def timeout_minutes(self) -> float:
        return (self.expires_at - self.started_at).total_seconds() / 60

    def seconds_remaining(self, now: datetime) -> int:
        return max(0, int((self.expires_at - now).total_seconds()))

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    @classmethod
    def from_state(cls, state: CartState) -> Optional["Reservation"]:
        if not state.is_reserved() or state.reserved_until is None:
            return None
        return cls(
            cart_id=str(cart_root(state.owner_id)),
            started_at=state.reserved_at or state.reserved_until,
            expires_at=state.reserved_until,
        )


class ReservationStateMachine:
    """Drives a cart through reserve, cancel and checkout completion.

    The cart state is the single source of truth: the reservation is read
    back from `status`/`reserved_until`, so a cart loaded from storage keeps
    its reservation.
    """

    def __init__(
        self,
        cart: CartAggregate,
        materializer: Optional[InvoiceMaterializer] = None,
        config: Optional[BusinessConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.cart = cart
        self.config = config or cart.config
        self.clock = clock or cart.clock or utc_now
        self.materializer = materializer or InvoiceMaterializer(self.config, self.clock)
        self.log = get_logger(domain="checkout")

    @property
    def status(self) -> str:
        return self.cart.state.status

    @property
    def reservation(self) -> Optional[Reservation]:
        return Reservation.from_state(self.cart.state)

    @property
    def is_reservation_expired(self) -> bool:
        return self.cart.state.is_reservation_expired(self.clock())

    @property
    def seconds_remaining(self) -> int:
        reservation = self.reservation
        if reservation is None:
            return 0
        return reservation.seconds_remaining(self.clock())

    def reserve(self, timeout_minutes: Optional[int] = None, expires_at: Optional[datetime] = None) -> Reservation:
        """Lock the cart for checkout, or refresh an existing reservation's timer."""
        state = self.cart.state
        if not state.exists():
            raise AuthenticationRequired()
        if state.is_empty():
            raise EmptyCartError()

        now = self.clock()
        if expires_at is None:
            timeout = self.config.reservation_minutes if timeout_minutes is None else timeout_minutes
            require_positive(timeout, errmsg.TIMEOUT_POSITIVE, field="timeout_minutes")
            expires_at = now + timedelta(minutes=timeout)
        elif expires_at <= now:
            raise ValidationError(errmsg.TIMEOUT_POSITIVE, field="expires_at")

        refreshed = state.is_reserved()
        self.cart.restore(replace(state.copy(), status=CartStatus.RESERVED, reserved_at=now, reserved_until=expires_at))

        reservation = self.reservation
        self.log.info(
            "reservation_refreshed" if refreshed else "cart_reserved",
            cart_id=reservation.cart_id,
            expires_at=expires_at.isoformat(),
        )
        return reservation

    def cancel(self) -> bool:
        """Release the reservation. Returns False when nothing was held."""
        state = self.cart.state
        if not state.is_reserved():
            return False

        expired = state.is_reservation_expired(self.clock())
        self.cart.restore(replace(state.copy(), status=CartStatus.ACTIVE, reserved_at=None, reserved_until=None))
        self.log.info("reservation_cancelled", cart_id=str(cart_root(state.owner_id)), expired=expired)
        return True

    def ensure_completable(self) -> Reservation:
        state = self.cart.state
        if not state.exists():
            raise AuthenticationRequired()
        reservation = self.reservation
        if reservation is None:
            raise ReservationExpiredError(errmsg.NOT_RESERVED)
        if reservation.is_expired(self.clock()):
            raise ReservationExpiredError()
        if state.is_empty():
            raise EmptyCartError()
        return reservation

    def require_pickup_acknowledged(self, pickup_acknowledged: bool) -> None:
        if self.cart.calculation.shipping.force_pickup and not pickup_acknowledged:
            raise ValidationError(errmsg.PICKUP_ACK_REQUIRED, field="pickup_acknowledged")

    def complete_checkout(self, buyer: Buyer, order_id: Optional[str] = None, pickup_acknowledged: bool = False) -> Invoice:
        """Materialize the invoice and reset to a fresh empty cart."""
        reservation = self.ensure_completable()
        self.require_pickup_acknowledged(pickup_acknowledged)
        return self.finalize(reservation, buyer, order_id)

    def finalize(self, reservation: Reservation, buyer: Buyer, order_id: Optional[str] = None) -> Invoice:
        """Close out an already-checked reservation.

        Expiry is not re-checked: once inventory has been committed against
        `reservation`, the order stands even if the timer ran out meanwhile.
        """
        state, calculation = self.cart.view()

        invoice = self.materializer.materialize(state, calculation, reservation, buyer, order_id)

        self.cart.restore(replace(state.copy(), status=CartStatus.CHECKED_OUT))
        self.log.info("checked_out", cart_id=reservation.cart_id, invoice_number=invoice.invoice_number, order_id=order_id)
        self.cart.reset()
        return invoice
