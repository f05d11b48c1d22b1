"""Preconditions shared by every cart mutation."""

from datetime import datetime

from ...errors import AuthenticationRequired, CartLockedError, errmsg
from ..state import CartState


def require_modifiable(state: CartState, now: datetime) -> None:
    if not state.exists():
        raise AuthenticationRequired()
    if state.can_modify():
        return
    if state.is_reservation_expired(now):
        raise CartLockedError(errmsg.CART_RESERVATION_LAPSED)
    raise CartLockedError()
