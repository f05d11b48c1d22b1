"""UpdateItem command handler."""

from datetime import datetime

from ...errors import ValidationError, errmsg
from ...validation import require_any_quantity, require_non_negative
from ..commands import UpdateItem
from ..state import CartState
from .guards import require_modifiable


def handle_update_item(state: CartState, cmd: UpdateItem, now: datetime, log) -> CartState:
    require_modifiable(state, now)

    if cmd.product_ref not in state.items:
        raise ValidationError(errmsg.ITEM_NOT_IN_CART, field="product_ref")
    require_non_negative(cmd.crate_qty, errmsg.QUANTITY_NEGATIVE, field="crate_qty")
    require_non_negative(cmd.piece_qty, errmsg.QUANTITY_NEGATIVE, field="piece_qty")
    require_any_quantity(cmd.crate_qty, cmd.piece_qty, errmsg.QUANTITY_REQUIRED)

    item = state.items[cmd.product_ref]

    log.info(
        "updating_item",
        product_ref=cmd.product_ref,
        old_crate_qty=item.crate_qty,
        old_piece_qty=item.piece_qty,
        crate_qty=cmd.crate_qty,
        piece_qty=cmd.piece_qty,
    )

    new_state = state.copy()
    new_state.items[cmd.product_ref] = item.with_quantities(cmd.crate_qty, cmd.piece_qty)
    return new_state
