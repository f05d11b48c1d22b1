"""Error types for the stonecart checkout engine."""

from typing import Optional


class errmsg:
    """Error message constants for the cart and checkout domains."""

    LOGIN_REQUIRED = "Please log in to modify your cart"
    CART_LOCKED = "Cart is reserved for checkout; cancel checkout first"
    CART_RESERVATION_LAPSED = "Cart reservation has expired; cancel it before modifying the cart"
    CART_EMPTY = "Cart is empty"
    ITEM_NOT_IN_CART = "Item not in cart"
    QUANTITY_REQUIRED = "Please specify at least one crate or piece"
    QUANTITY_NEGATIVE = "Quantity cannot be negative"
    QUANTITY_WHOLE = "Quantity must be a whole number"
    PRICE_NEGATIVE = "Unit price cannot be negative"
    WEIGHT_NEGATIVE = "Weight per piece cannot be negative"
    PIECES_PER_CRATE_POSITIVE = "Pieces per crate must be at least 1"
    PIECES_PER_CRATE_WHOLE = "Pieces per crate must be a whole number"
    PRODUCT_ID_REQUIRED = "Product ID is required"
    UNSUPPORTED_PRODUCT_ID = "Unsupported product identifier"
    NOT_RESERVED = "Cart is not reserved for checkout"
    RESERVATION_EXPIRED = "Reservation has expired; cancel and reserve again"
    TIMEOUT_POSITIVE = "Reservation timeout must be positive"
    PICKUP_ACK_REQUIRED = "Order exceeds the shipping weight limit; pickup must be acknowledged"
    FIELD_REQUIRED = "Please fill in {field}"
    INVALID_EMAIL = "Please enter a valid email address"
    INVALID_PHONE = "Please enter a valid 10-digit phone number"
    INVALID_PINCODE = "Please enter a valid 6-digit pincode"
    NO_INVOICE = "No invoice has been generated yet"
    LOAD_FAILED = "Could not load your saved cart; starting with an empty cart"
    SESSION_EXPIRED = "Your session has expired; please log in again"
    RESERVATION_LAPSED_NOTICE = "Your reservation has expired; cancel checkout and reserve again"


class CartError(Exception):
    """Base class for cart and checkout errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class ValidationError(CartError):
    """Malformed input: zero quantities, bad identifiers, missing checkout fields."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ConfigurationError(CartError):
    """Business configuration is missing or invalid."""


class AuthenticationRequired(CartError):
    """A mutation was attempted without an identity."""

    def __init__(self, message: str = errmsg.LOGIN_REQUIRED, cause: Optional[Exception] = None):
        super().__init__(message, cause)


class CartLockedError(CartError):
    """A mutation was attempted while the cart is reserved."""

    def __init__(self, message: str = errmsg.CART_LOCKED):
        super().__init__(message)


class EmptyCartError(CartError):
    """Checkout was started on a cart with no items."""

    def __init__(self, message: str = errmsg.CART_EMPTY):
        super().__init__(message)


class ReservationExpiredError(CartError):
    """Checkout completion was attempted without a live reservation."""

    def __init__(self, message: str = errmsg.RESERVATION_EXPIRED):
        super().__init__(message)


class InventoryUnavailableError(CartError):
    """The inventory backend could not satisfy a hold. Surfaced verbatim."""

    def __init__(self, message: str, product_ref: Optional[str] = None):
        super().__init__(message)
        self.product_ref = product_ref


class PersistenceError(CartError):
    """Transient failure loading or saving cart state."""
