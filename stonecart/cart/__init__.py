"""Cart aggregate, commands and business calculation."""

from .aggregate import CartAggregate, CartView
from .calculation import BusinessCalculation, PricedLine, calculate
from .commands import AddItem, ClearCart, RemoveItem, UpdateItem
from .state import CartState, CartStatus, LineItem

__all__ = [
    "CartAggregate",
    "CartView",
    "BusinessCalculation",
    "PricedLine",
    "calculate",
    "AddItem",
    "ClearCart",
    "RemoveItem",
    "UpdateItem",
    "CartState",
    "CartStatus",
    "LineItem",
]
