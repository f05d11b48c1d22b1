"""ClearCart command handler."""

from datetime import datetime

from ..commands import ClearCart
from ..state import CartState
from .guards import require_modifiable


def handle_clear_cart(state: CartState, cmd: ClearCart, now: datetime, log) -> CartState:
    require_modifiable(state, now)

    log.info("clearing_cart", item_count=len(state.items))

    new_state = state.copy()
    new_state.items.clear()
    return new_state
