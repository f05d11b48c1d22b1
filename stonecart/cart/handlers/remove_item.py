"""RemoveItem command handler."""

from datetime import datetime

from ..commands import RemoveItem
from ..state import CartState
from .guards import require_modifiable


def handle_remove_item(state: CartState, cmd: RemoveItem, now: datetime, log) -> CartState:
    require_modifiable(state, now)

    if cmd.product_ref not in state.items:
        log.info("item_already_absent", product_ref=cmd.product_ref)
        return state

    log.info("removing_item", product_ref=cmd.product_ref)

    new_state = state.copy()
    del new_state.items[cmd.product_ref]
    return new_state
