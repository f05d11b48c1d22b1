"""In-process adapters for the collaborator ports."""

from .memory import (
    CollectingNotifier,
    InMemoryCartRepository,
    InMemoryInventory,
    LogNotifier,
    StaticIdentityProvider,
    StockLevel,
)

__all__ = [
    "CollectingNotifier",
    "InMemoryCartRepository",
    "InMemoryInventory",
    "LogNotifier",
    "StaticIdentityProvider",
    "StockLevel",
]
