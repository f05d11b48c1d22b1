"""Cart and checkout engine for a stone products storefront."""

from .cart import AddItem, BusinessCalculation, CartAggregate, CartState, CartStatus, ClearCart, LineItem, RemoveItem, UpdateItem
from .checkout import Reservation, ReservationCountdown, ReservationStateMachine, ShippingInfo
from .config import BusinessConfig
from .errors import (
    AuthenticationRequired,
    CartError,
    CartLockedError,
    ConfigurationError,
    EmptyCartError,
    InventoryUnavailableError,
    PersistenceError,
    ReservationExpiredError,
    ValidationError,
)
from .identity import cart_root, normalize_product_ref
from .invoice import Invoice, InvoiceMaterializer, format_invoice_text, render_invoice_html
from .parties import Buyer, Party
from .ports import Identity
from .session import CartSession

__version__ = "0.1.0"

__all__ = [
    "AddItem",
    "BusinessCalculation",
    "CartAggregate",
    "CartState",
    "CartStatus",
    "ClearCart",
    "LineItem",
    "RemoveItem",
    "UpdateItem",
    "Reservation",
    "ReservationCountdown",
    "ReservationStateMachine",
    "ShippingInfo",
    "BusinessConfig",
    "AuthenticationRequired",
    "CartError",
    "CartLockedError",
    "ConfigurationError",
    "EmptyCartError",
    "InventoryUnavailableError",
    "PersistenceError",
    "ReservationExpiredError",
    "ValidationError",
    "cart_root",
    "normalize_product_ref",
    "Invoice",
    "InvoiceMaterializer",
    "format_invoice_text",
    "render_invoice_html",
    "Buyer",
    "Party",
    "Identity",
    "CartSession",
]
