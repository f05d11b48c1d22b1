"""Crate/piece packaging and line pricing.

Pure functions: safe to call for live pricing previews without touching any
cart state.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import NamedTuple, Union

from ..errors import errmsg
from ..validation import require_non_negative, require_pieces_per_crate

DecimalLike = Union[Decimal, int, str]

CENTS = Decimal("0.01")


class LinePricing(NamedTuple):
    """Result of pricing one (crate, piece) request."""

    total_pieces: int
    total_crates: int
    filler_pieces: int
    filler_charges: Decimal
    weight: Decimal
    subtotal: Decimal


def round_money(amount: Decimal) -> Decimal:
    """Round to cents using banker's rounding."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def total_pieces(crate_qty: int, piece_qty: int, pieces_per_crate: int) -> int:
    return crate_qty * pieces_per_crate + piece_qty


def filler_pieces(total: int, pieces_per_crate: int) -> int:
    """Pieces needed to reach the next full crate boundary."""
    remainder = total % pieces_per_crate
    return 0 if remainder == 0 else pieces_per_crate - remainder


def compute(
    crate_qty: int,
    piece_qty: int,
    pieces_per_crate: int,
    unit_price: DecimalLike,
    weight_per_piece: DecimalLike = Decimal("0"),
    filler_rate: DecimalLike = Decimal("0.5"),
) -> LinePricing:
    """Price one line.

    Filler pieces are billed at `filler_rate` of the unit price each and are
    not included in the subtotal.

    Raises:
        ConfigurationError: pieces_per_crate < 1
        ValidationError: negative quantities, price or weight
    """
    require_pieces_per_crate(pieces_per_crate, errmsg.PIECES_PER_CRATE_POSITIVE)
    require_non_negative(crate_qty, errmsg.QUANTITY_NEGATIVE, field="crate_qty")
    require_non_negative(piece_qty, errmsg.QUANTITY_NEGATIVE, field="piece_qty")

    unit_price = Decimal(unit_price)
    weight_per_piece = Decimal(weight_per_piece)
    filler_rate = Decimal(filler_rate)
    require_non_negative(unit_price, errmsg.PRICE_NEGATIVE, field="unit_price")
    require_non_negative(weight_per_piece, errmsg.WEIGHT_NEGATIVE, field="weight_per_piece")

    pieces = total_pieces(crate_qty, piece_qty, pieces_per_crate)
    filler = filler_pieces(pieces, pieces_per_crate)
    crates = -(-pieces // pieces_per_crate)

    return LinePricing(
        total_pieces=pieces,
        total_crates=crates,
        filler_pieces=filler,
        filler_charges=round_money(filler * unit_price * filler_rate),
        weight=pieces * weight_per_piece,
        subtotal=round_money(pieces * unit_price),
    )
