"""Checkout: reservation state machine, countdown and shipping form."""

from .countdown import ReservationCountdown
from .forms import ShippingInfo
from .reservation import Reservation, ReservationStateMachine

__all__ = [
    "Reservation",
    "ReservationCountdown",
    "ReservationStateMachine",
    "ShippingInfo",
]
