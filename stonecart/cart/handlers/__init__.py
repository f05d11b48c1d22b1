"""Cart command handlers."""

from .guards import require_modifiable
from .add_item import handle_add_item
from .update_item import handle_update_item
from .remove_item import handle_remove_item
from .clear_cart import handle_clear_cart

__all__ = [
    "require_modifiable",
    "handle_add_item",
    "handle_update_item",
    "handle_remove_item",
    "handle_clear_cart",
]
