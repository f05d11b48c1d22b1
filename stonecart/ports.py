"""Interfaces to the collaborators the cart engine does not own."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence

from .cart.state import LineItem


@dataclass(frozen=True)
class Identity:
    user_id: str
    tier: Optional[str] = None
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


class IdentityProvider(Protocol):
    def current_identity(self) -> Optional[Identity]:
        ...

    def logout(self) -> None:
        ...


class CartRepository(Protocol):
    """Keyed cart store. Transient failures raise PersistenceError;
    a rejected session raises AuthenticationRequired."""

    async def load_cart(self, user_id: str) -> Optional[dict]:
        ...

    async def save_cart(self, user_id: str, snapshot: dict) -> None:
        ...


class InventoryBackend(Protocol):
    """Stock holds. Shortfalls raise InventoryUnavailableError."""

    async def reserve_inventory(self, cart_id: str, items: Sequence[LineItem], timeout_minutes: int) -> datetime:
        ...

    async def release_inventory(self, cart_id: str) -> None:
        ...

    async def commit_inventory(self, cart_id: str) -> str:
        ...


class Notifier(Protocol):
    def notify(self, level: str, message: str) -> None:
        ...


class NotifyLevel:
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
