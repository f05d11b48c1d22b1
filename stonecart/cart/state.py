"""Cart state and its persisted snapshot form."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..pricing.packaging import filler_pieces, total_pieces


class CartStatus:
    ACTIVE = "active"
    RESERVED = "reserved"
    CHECKED_OUT = "checked_out"


@dataclass(frozen=True)
class LineItem:
    product_ref: str
    crate_qty: int
    piece_qty: int
    pieces_per_crate: int
    unit_price: Decimal
    weight_per_piece: Decimal = Decimal("0")
    name: str = ""

    @property
    def total_pieces(self) -> int:
        return total_pieces(self.crate_qty, self.piece_qty, self.pieces_per_crate)

    @property
    def filler_pieces(self) -> int:
        return filler_pieces(self.total_pieces, self.pieces_per_crate)

    @property
    def weight(self) -> Decimal:
        return self.total_pieces * self.weight_per_piece

    def with_quantities(self, crate_qty: int, piece_qty: int) -> "LineItem":
        return replace(self, crate_qty=crate_qty, piece_qty=piece_qty)

    def to_dict(self) -> dict:
        return {
            "product_ref": self.product_ref,
            "name": self.name,
            "crate_qty": self.crate_qty,
            "piece_qty": self.piece_qty,
            "pieces_per_crate": self.pieces_per_crate,
            "unit_price": str(self.unit_price),
            "weight_per_piece": str(self.weight_per_piece),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        return cls(
            product_ref=data["product_ref"],
            name=data.get("name", ""),
            crate_qty=int(data.get("crate_qty", 0)),
            piece_qty=int(data.get("piece_qty", 0)),
            pieces_per_crate=int(data["pieces_per_crate"]),
            unit_price=Decimal(str(data["unit_price"])),
            weight_per_piece=Decimal(str(data.get("weight_per_piece", "0"))),
        )


@dataclass
class CartState:
    owner_id: str = ""
    items: dict = field(default_factory=dict)  # product_ref -> LineItem
    status: str = CartStatus.ACTIVE
    reserved_at: Optional[datetime] = None
    reserved_until: Optional[datetime] = None

    def exists(self) -> bool:
        return bool(self.owner_id)

    def is_active(self) -> bool:
        return self.status == CartStatus.ACTIVE

    def is_reserved(self) -> bool:
        return self.status == CartStatus.RESERVED

    def is_empty(self) -> bool:
        return not self.items

    def can_modify(self) -> bool:
        return self.exists() and self.is_active()

    def is_reservation_expired(self, now: datetime) -> bool:
        return self.is_reserved() and self.reserved_until is not None and now >= self.reserved_until

    def copy(self) -> "CartState":
        # LineItems are frozen, so a shallow copy of the mapping is enough.
        return replace(self, items=dict(self.items))

    def to_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "status": self.status,
            "reserved_at": self.reserved_at.isoformat() if self.reserved_at else None,
            "reserved_until": self.reserved_until.isoformat() if self.reserved_until else None,
            "items": [item.to_dict() for item in self.items.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartState":
        items = {}
        for raw in data.get("items", []):
            item = LineItem.from_dict(raw)
            items[item.product_ref] = item
        return cls(
            owner_id=data.get("owner_id", ""),
            items=items,
            status=data.get("status", CartStatus.ACTIVE),
            reserved_at=_parse_datetime(data.get("reserved_at")),
            reserved_until=_parse_datetime(data.get("reserved_until")),
        )


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None
