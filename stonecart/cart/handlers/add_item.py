"""AddItem command handler."""

from datetime import datetime

from ...errors import errmsg
from ...validation import require_any_quantity, require_non_negative, require_pieces_per_crate
from ..commands import AddItem
from ..state import CartState, LineItem
from .guards import require_modifiable


def handle_add_item(state: CartState, cmd: AddItem, now: datetime, log) -> CartState:
    require_modifiable(state, now)

    require_non_negative(cmd.crate_qty, errmsg.QUANTITY_NEGATIVE, field="crate_qty")
    require_non_negative(cmd.piece_qty, errmsg.QUANTITY_NEGATIVE, field="piece_qty")
    require_any_quantity(cmd.crate_qty, cmd.piece_qty, errmsg.QUANTITY_REQUIRED)
    require_pieces_per_crate(cmd.pieces_per_crate, errmsg.PIECES_PER_CRATE_POSITIVE)
    require_non_negative(cmd.unit_price, errmsg.PRICE_NEGATIVE, field="unit_price")
    require_non_negative(cmd.weight_per_piece, errmsg.WEIGHT_NEGATIVE, field="weight_per_piece")

    replaced = cmd.product_ref in state.items

    log.info(
        "adding_item",
        product_ref=cmd.product_ref,
        crate_qty=cmd.crate_qty,
        piece_qty=cmd.piece_qty,
        replaced=replaced,
    )

    new_state = state.copy()
    new_state.items[cmd.product_ref] = LineItem(
        product_ref=cmd.product_ref,
        name=cmd.name,
        crate_qty=cmd.crate_qty,
        piece_qty=cmd.piece_qty,
        pieces_per_crate=cmd.pieces_per_crate,
        unit_price=cmd.unit_price,
        weight_per_piece=cmd.weight_per_piece,
    )
    return new_state
