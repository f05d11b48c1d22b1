"""Cart aggregate: applies commands and recomputes the business calculation.

Each command runs against a copy of the current state. The copy and its fresh
calculation are swapped in together only after both succeed, so a rejected
command never leaves the cart half-updated.
"""

from typing import NamedTuple, Optional

from ..clock import Clock, utc_now
from ..config import BusinessConfig
from ..errors import AuthenticationRequired, CartError
from ..identity import cart_root
from ..log import get_logger
from .calculation import BusinessCalculation, calculate
from .commands import AddItem, ClearCart, RemoveItem, UpdateItem
from .handlers import handle_add_item, handle_clear_cart, handle_remove_item, handle_update_item
from .state import CartState

DOMAIN = "cart"

_HANDLERS = {
    AddItem: handle_add_item,
    UpdateItem: handle_update_item,
    RemoveItem: handle_remove_item,
    ClearCart: handle_clear_cart,
}


class CartView(NamedTuple):
    state: CartState
    calculation: BusinessCalculation


class CartAggregate:
    """The current owner's cart.

    Guests see a permanently empty cart and every mutation raises
    AuthenticationRequired. When the identity changes, the aggregate starts
    over with an empty cart for the new owner.
    """

    def __init__(self, identity_provider, config: Optional[BusinessConfig] = None, clock: Clock = utc_now):
        self.identity_provider = identity_provider
        self.config = config or BusinessConfig()
        self.clock = clock
        self.log = get_logger(domain=DOMAIN, service="aggregate")
        self._state = CartState()
        self._calculation = BusinessCalculation.empty(self.config)

    @property
    def identity(self):
        return self.identity_provider.current_identity()

    @property
    def tier(self) -> Optional[str]:
        identity = self.identity
        return identity.tier if identity else None

    @property
    def state(self) -> CartState:
        return self.view().state

    @property
    def calculation(self) -> BusinessCalculation:
        return self.view().calculation

    @property
    def cart_id(self) -> Optional[str]:
        identity = self.identity
        return str(cart_root(identity.user_id)) if identity else None

    def view(self) -> CartView:
        identity = self.identity
        if identity is None:
            return CartView(CartState(), BusinessCalculation.empty(self.config))
        if self._state.owner_id != identity.user_id:
            self._swap(CartState(owner_id=identity.user_id), identity.tier)
        return CartView(self._state, self._calculation)

    def add_item(self, cmd: AddItem) -> CartView:
        return self.execute(cmd)

    def update_item(self, cmd: UpdateItem) -> CartView:
        return self.execute(cmd)

    def remove_item(self, cmd: RemoveItem) -> CartView:
        return self.execute(cmd)

    def clear(self) -> CartView:
        return self.execute(ClearCart())

    def execute(self, cmd) -> CartView:
        handler = _HANDLERS.get(type(cmd))
        if handler is None:
            raise TypeError(f"Unknown command type: {type(cmd).__name__}")

        log = self.log.bind(command_type=type(cmd).__name__)
        identity = self.identity
        if identity is None:
            log.warning("command_rejected", reason="guest")
            raise AuthenticationRequired()

        current = self.view().state
        log = log.bind(cart_id=str(cart_root(identity.user_id)))

        try:
            new_state = handler(current, cmd, self.clock(), log)
            calculation = calculate(new_state.items, identity.tier, self.config)
        except CartError as e:
            log.warning("command_rejected", reason=str(e))
            raise

        self._swap(new_state, identity.tier, calculation)
        return CartView(self._state, self._calculation)

    def restore(self, state: CartState) -> CartView:
        """Install a previously captured or loaded state and recompute."""
        self._swap(state, self.tier)
        return CartView(self._state, self._calculation)

    def reset(self) -> CartView:
        """Replace the cart with a fresh empty active one for the current owner."""
        identity = self.identity
        owner_id = identity.user_id if identity else ""
        return self.restore(CartState(owner_id=owner_id))

    def _swap(self, state: CartState, tier: Optional[str], calculation: Optional[BusinessCalculation] = None) -> None:
        if calculation is None:
            calculation = calculate(state.items, tier, self.config)
        self._state = state
        self._calculation = calculation
