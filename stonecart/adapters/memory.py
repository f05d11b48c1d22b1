"""In-memory adapters for tests and the demo CLI."""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..cart.state import LineItem
from ..clock import Clock, utc_now
from ..errors import CartError, InventoryUnavailableError
from ..log import get_logger
from ..ports import Identity


class InMemoryCartRepository:
    """Stores carts as JSON strings, exactly as a remote store would see them.

    `fail_next_load` / `fail_next_save` queue an exception for the next call.
    """

    def __init__(self):
        self._carts: Dict[str, str] = {}
        self._load_failures: List[Exception] = []
        self._save_failures: List[Exception] = []
        self.save_count = 0

    def fail_next_load(self, error: Exception) -> None:
        self._load_failures.append(error)

    def fail_next_save(self, error: Exception) -> None:
        self._save_failures.append(error)

    def stored(self, user_id: str) -> Optional[dict]:
        raw = self._carts.get(user_id)
        return json.loads(raw) if raw is not None else None

    async def load_cart(self, user_id: str) -> Optional[dict]:
        if self._load_failures:
            raise self._load_failures.pop(0)
        return self.stored(user_id)

    async def save_cart(self, user_id: str, snapshot: dict) -> None:
        if self._save_failures:
            raise self._save_failures.pop(0)
        self._carts[user_id] = json.dumps(snapshot)
        self.save_count += 1


@dataclass
class StockLevel:
    on_hand: int = 0
    reserved: int = 0
    reservations: dict = field(default_factory=dict)  # cart_id -> pieces

    def available(self) -> int:
        return self.on_hand - self.reserved


class InMemoryInventory:
    """Piece-level stock holds keyed by cart.

    Products without a stock entry are treated as unlimited.
    """

    def __init__(self, stock: Optional[Mapping[str, int]] = None, clock: Clock = utc_now):
        self.clock = clock
        self.levels: Dict[str, StockLevel] = {ref: StockLevel(on_hand=qty) for ref, qty in (stock or {}).items()}
        self.holds: Dict[str, Tuple[Tuple[str, int], ...]] = {}
        self.commits: Dict[str, str] = {}
        self._failures: List[Exception] = []
        self.log = get_logger(domain="inventory", service="memory")

    def fail_next(self, error: Exception) -> None:
        self._failures.append(error)

    def _maybe_fail(self) -> None:
        if self._failures:
            raise self._failures.pop(0)

    async def reserve_inventory(self, cart_id: str, items: Sequence[LineItem], timeout_minutes: int) -> datetime:
        self._maybe_fail()

        # The cart's current hold counts as available; it is only dropped once the new one fits.
        for item in items:
            level = self.levels.get(item.product_ref)
            if level is None:
                continue
            available = level.available() + level.reservations.get(cart_id, 0)
            if available < item.total_pieces:
                raise InventoryUnavailableError(
                    f"Insufficient stock for {item.name or item.product_ref}: "
                    f"available {available}, requested {item.total_pieces}",
                    product_ref=item.product_ref,
                )

        self._release(cart_id)
        held = []
        for item in items:
            level = self.levels.get(item.product_ref)
            if level is not None:
                level.reserved += item.total_pieces
                level.reservations[cart_id] = item.total_pieces
            held.append((item.product_ref, item.total_pieces))
        self.holds[cart_id] = tuple(held)

        self.log.info("reserving_stock", cart_id=cart_id, lines=len(held), timeout_minutes=timeout_minutes)
        return self.clock() + timedelta(minutes=timeout_minutes)

    async def release_inventory(self, cart_id: str) -> None:
        self._maybe_fail()
        if self._release(cart_id):
            self.log.info("releasing_stock", cart_id=cart_id)

    async def commit_inventory(self, cart_id: str) -> str:
        self._maybe_fail()
        held = self.holds.pop(cart_id, None)
        if held is None:
            raise CartError(f"No inventory hold for cart {cart_id}")

        for product_ref, _ in held:
            level = self.levels.get(product_ref)
            if level is not None:
                qty = level.reservations.pop(cart_id, 0)
                level.reserved -= qty
                level.on_hand -= qty

        order_id = f"ORD-{uuid.uuid4().hex[:12].upper()}"
        self.commits[cart_id] = order_id
        self.log.info("committing_stock", cart_id=cart_id, order_id=order_id)
        return order_id

    def _release(self, cart_id: str) -> bool:
        held = self.holds.pop(cart_id, None)
        if held is None:
            return False
        for product_ref, _ in held:
            level = self.levels.get(product_ref)
            if level is not None:
                level.reserved -= level.reservations.pop(cart_id, 0)
        return True


class StaticIdentityProvider:
    def __init__(self, identity: Optional[Identity] = None):
        self._identity = identity

    def current_identity(self) -> Optional[Identity]:
        return self._identity

    def login(self, identity: Identity) -> None:
        self._identity = identity

    def logout(self) -> None:
        self._identity = None


class LogNotifier:
    """Routes user-facing notifications to the structured log."""

    def __init__(self):
        self.log = get_logger(domain="notifications")

    def notify(self, level: str, message: str) -> None:
        emit = self.log.warning if level in ("warning", "error") else self.log.info
        emit("user_notification", level=level, message=message)


class CollectingNotifier:
    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def notify(self, level: str, message: str) -> None:
        self.messages.append((level, message))

    def levels(self) -> List[str]:
        return [level for level, _ in self.messages]
