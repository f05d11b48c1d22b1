"""Normalized cart commands.

Constructing a command canonicalizes the product identifier and coerces money
and weight to Decimal, so handlers only ever see one shape.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ..errors import errmsg
from ..identity import normalize_product_ref
from ..validation import require_int


def _decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _require_quantities(crate_qty, piece_qty) -> None:
    require_int(crate_qty, errmsg.QUANTITY_WHOLE, field="crate_qty")
    require_int(piece_qty, errmsg.QUANTITY_WHOLE, field="piece_qty")


@dataclass(frozen=True)
class AddItem:
    product_ref: Any
    crate_qty: int
    piece_qty: int
    pieces_per_crate: int
    unit_price: Decimal
    weight_per_piece: Decimal = Decimal("0")
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "product_ref", normalize_product_ref(self.product_ref))
        _require_quantities(self.crate_qty, self.piece_qty)
        require_int(self.pieces_per_crate, errmsg.PIECES_PER_CRATE_WHOLE, field="pieces_per_crate")
        object.__setattr__(self, "unit_price", _decimal(self.unit_price))
        object.__setattr__(self, "weight_per_piece", _decimal(self.weight_per_piece))


@dataclass(frozen=True)
class UpdateItem:
    product_ref: Any
    crate_qty: int
    piece_qty: int

    def __post_init__(self):
        object.__setattr__(self, "product_ref", normalize_product_ref(self.product_ref))
        _require_quantities(self.crate_qty, self.piece_qty)


@dataclass(frozen=True)
class RemoveItem:
    product_ref: Any

    def __post_init__(self):
        object.__setattr__(self, "product_ref", normalize_product_ref(self.product_ref))


@dataclass(frozen=True)
class ClearCart:
    pass
