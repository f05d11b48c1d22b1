"""Validation helpers for command precondition checks.

Eliminates repeated guard boilerplate across the cart handlers and pricing
functions.
"""

from decimal import Decimal
from typing import Union

from .errors import ConfigurationError, ValidationError

Number = Union[int, Decimal]


def require_present(value: str, error_msg: str, field: str = None) -> None:
    """Require that a string field is non-blank."""
    if not value or not str(value).strip():
        raise ValidationError(error_msg, field=field)


def require_int(value, error_msg: str, field: str = None) -> None:
    """Require a whole number. bool is rejected even though it subclasses int."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(error_msg, field=field)


def require_non_negative(value: Number, error_msg: str, field: str = None) -> None:
    """Require that a value is zero or greater."""
    if value < 0:
        raise ValidationError(error_msg, field=field)


def require_positive(value: Number, error_msg: str, field: str = None) -> None:
    """Require that a value is greater than zero."""
    if value <= 0:
        raise ValidationError(error_msg, field=field)


def require_any_quantity(crate_qty: int, piece_qty: int, error_msg: str) -> None:
    """Require that a line carries at least one crate or piece."""
    if crate_qty == 0 and piece_qty == 0:
        raise ValidationError(error_msg, field="quantity")


def require_pieces_per_crate(pieces_per_crate: int, error_msg: str) -> None:
    """Require a usable crate size. Zero would make every crate boundary undefined."""
    if pieces_per_crate < 1:
        raise ConfigurationError(error_msg)


def require_fraction(value: Decimal, name: str, upper_inclusive: bool = True) -> None:
    """Require a configured rate in [0, 1] (or [0, 1) when upper_inclusive is False)."""
    if value < 0 or value > 1 or (not upper_inclusive and value == 1):
        bound = "]" if upper_inclusive else ")"
        raise ConfigurationError(f"{name} must be in [0, 1{bound}, got {value}")
