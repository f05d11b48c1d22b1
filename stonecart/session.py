"""Cart session: async orchestration over persistence, inventory and identity.

All mutations go through one asyncio.Lock, so overlapping calls are queued in
arrival order rather than interleaved. A mutation that cannot be persisted is
rolled back locally before the PersistenceError reaches the caller.
"""

import asyncio
from decimal import Decimal
from typing import Callable, Optional

from .cart.aggregate import CartAggregate, CartView
from .cart.commands import AddItem, RemoveItem, UpdateItem
from .cart.state import CartState
from .checkout.countdown import ReservationCountdown
from .checkout.forms import ShippingInfo
from .checkout.reservation import Reservation, ReservationStateMachine
from .clock import Clock, utc_now
from .config import BusinessConfig
from .errors import (
    AuthenticationRequired,
    CartError,
    EmptyCartError,
    InventoryUnavailableError,
    PersistenceError,
    errmsg,
)
from .identity import cart_root
from .invoice.models import Invoice
from .invoice.renderer import render_invoice_html
from .log import get_logger
from .parties import Buyer
from .ports import NotifyLevel
from .pricing.packaging import LinePricing, compute


class CartSession:
    def __init__(
        self,
        identity_provider,
        repository,
        inventory,
        notifier=None,
        config: Optional[BusinessConfig] = None,
        clock: Clock = utc_now,
    ):
        self.identity_provider = identity_provider
        self.repository = repository
        self.inventory = inventory
        self.notifier = notifier
        self.config = config or BusinessConfig()
        self.clock = clock
        self.cart = CartAggregate(identity_provider, self.config, clock)
        self.checkout = ReservationStateMachine(self.cart, config=self.config, clock=clock)
        self.last_invoice: Optional[Invoice] = None
        self._lock = asyncio.Lock()
        self._countdown: Optional[ReservationCountdown] = None
        self.log = get_logger(domain="session")

    def view(self) -> CartView:
        return self.cart.view()

    @property
    def state(self) -> CartState:
        return self.cart.state

    @property
    def calculation(self):
        return self.cart.calculation

    async def load(self) -> CartView:
        """Load the owner's saved cart.

        A transient store failure leaves the user logged in with an empty
        cart; a rejected session logs the user out.
        """
        async with self._lock:
            identity = self.identity_provider.current_identity()
            if identity is None:
                return self.cart.view()

            log = self.log.bind(cart_id=str(cart_root(identity.user_id)))
            try:
                snapshot = await self.repository.load_cart(identity.user_id)
            except AuthenticationRequired:
                self._expire_session(log)
                raise
            except PersistenceError as e:
                log.warning("cart_load_failed", error=str(e))
                self._notify(NotifyLevel.WARNING, errmsg.LOAD_FAILED)
                return self.cart.reset()

            if snapshot is None:
                log.info("cart_created")
                return self.cart.reset()

            state = CartState.from_dict(snapshot)
            state.owner_id = identity.user_id
            log.info("cart_loaded", item_count=len(state.items), status=state.status)
            return self.cart.restore(state)

    async def add_item(self, cmd: AddItem) -> CartView:
        view = await self._mutate(lambda: self.cart.add_item(cmd))
        self._notify(NotifyLevel.SUCCESS, f"{cmd.name or 'Item'} added to cart")
        return view

    async def update_item(self, cmd: UpdateItem) -> CartView:
        return await self._mutate(lambda: self.cart.update_item(cmd))

    async def remove_item(self, cmd: RemoveItem) -> CartView:
        view = await self._mutate(lambda: self.cart.remove_item(cmd))
        self._notify(NotifyLevel.INFO, "Item removed from cart")
        return view

    async def clear(self) -> CartView:
        return await self._mutate(self.cart.clear)

    async def reserve(self, timeout_minutes: Optional[int] = None) -> Reservation:
        """Place an inventory hold, then lock the cart for checkout."""
        async with self._lock:
            previous = self._require_owner_state()
            if previous.is_empty():
                raise EmptyCartError()

            cart_id = str(cart_root(previous.owner_id))
            timeout = self.config.reservation_minutes if timeout_minutes is None else timeout_minutes
            items = list(previous.items.values())

            try:
                expires_at = await self.inventory.reserve_inventory(cart_id, items, timeout)
            except InventoryUnavailableError as e:
                self.log.warning("inventory_unavailable", cart_id=cart_id, product_ref=e.product_ref)
                if previous.is_reserved():
                    await self._drop_reservation(cart_id)
                self._notify(NotifyLevel.ERROR, e.message)
                raise

            try:
                reservation = self.checkout.reserve(timeout, expires_at=expires_at)
                await self._save(self.cart.state)
            except AuthenticationRequired:
                await self._release_quietly(cart_id)
                raise
            except CartError:
                self.cart.restore(previous)
                # A refresh replaced the old hold, so the restored reservation still has one.
                if not previous.is_reserved():
                    await self._release_quietly(cart_id)
                raise

            self._notify(NotifyLevel.SUCCESS, "Items reserved for checkout")
            return reservation

    async def cancel(self) -> bool:
        """Release the inventory hold, then the local reservation."""
        async with self._lock:
            previous = self._require_owner_state()
            if not previous.is_reserved():
                return False

            await self.inventory.release_inventory(str(cart_root(previous.owner_id)))
            self.stop_countdown()
            self.checkout.cancel()
            try:
                await self._save(self.cart.state)
            except PersistenceError as e:
                self.log.warning("cart_save_failed_after_cancel", error=str(e))

            self._notify(NotifyLevel.INFO, "Checkout cancelled")
            return True

    async def complete_checkout(
        self,
        buyer: Optional[Buyer] = None,
        shipping_info: Optional[ShippingInfo] = None,
        pickup_acknowledged: bool = False,
    ) -> Invoice:
        """Commit the inventory hold and produce the invoice.

        The inventory commit cannot be undone, so once it succeeds the
        invoice is kept even if saving the reset cart fails.
        """
        async with self._lock:
            identity = self.identity_provider.current_identity()
            if identity is None:
                raise AuthenticationRequired()
            if buyer is None:
                info = shipping_info.validate() if shipping_info is not None else None
                buyer = Buyer.from_identity(identity, info)

            reservation = self.checkout.ensure_completable()
            self.checkout.require_pickup_acknowledged(pickup_acknowledged)

            order_id = await self.inventory.commit_inventory(reservation.cart_id)
            invoice = self.checkout.finalize(reservation, buyer, order_id)
            self.last_invoice = invoice
            self.stop_countdown()

            try:
                await self._save(self.cart.state)
            except PersistenceError as e:
                self.log.warning("cart_save_failed_after_checkout", invoice_number=invoice.invoice_number, error=str(e))

            self._notify(NotifyLevel.SUCCESS, f"Order placed: invoice {invoice.invoice_number}")
            return invoice

    async def logout(self) -> None:
        """Release any hold, forget the cart and log out."""
        async with self._lock:
            state = self.cart.state
            self.stop_countdown()
            if state.exists() and state.is_reserved():
                await self.inventory.release_inventory(str(cart_root(state.owner_id)))
            self.identity_provider.logout()
            self.cart.reset()
            self.log.info("logged_out")

    def quote(
        self,
        crate_qty: int,
        piece_qty: int,
        pieces_per_crate: int,
        unit_price: Decimal,
        weight_per_piece: Decimal = Decimal("0"),
    ) -> LinePricing:
        """Live pricing preview; does not touch the cart."""
        return compute(crate_qty, piece_qty, pieces_per_crate, unit_price, weight_per_piece, self.config.filler_rate)

    def render_invoice(self, invoice: Optional[Invoice] = None) -> str:
        invoice = invoice or self.last_invoice
        if invoice is None:
            raise CartError(errmsg.NO_INVOICE)
        return render_invoice_html(invoice)

    def countdown(
        self,
        on_tick: Optional[Callable[[int], None]] = None,
        sleep=asyncio.sleep,
    ) -> ReservationCountdown:
        """Create (and track) a countdown for the current reservation."""
        self.stop_countdown()
        self._countdown = ReservationCountdown(
            lambda: self.checkout.seconds_remaining,
            on_tick=on_tick,
            on_expired=lambda: self._notify(NotifyLevel.WARNING, errmsg.RESERVATION_LAPSED_NOTICE),
            sleep=sleep,
        )
        return self._countdown

    def stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.stop()
            self._countdown = None

    async def _mutate(self, action) -> CartView:
        async with self._lock:
            previous = self.cart.state
            view = action()
            try:
                await self._save(view.state)
            except PersistenceError:
                self.cart.restore(previous)
                raise
            return view

    async def _save(self, state: CartState) -> None:
        try:
            await self.repository.save_cart(state.owner_id, state.to_dict())
        except AuthenticationRequired:
            self._expire_session(self.log)
            raise
        except PersistenceError as e:
            self.log.warning("cart_save_failed", error=str(e))
            self._notify(NotifyLevel.ERROR, "Could not save your cart; please try again")
            raise

    async def _drop_reservation(self, cart_id: str) -> None:
        """Release a held reservation after the inventory refused to refresh it."""
        await self._release_quietly(cart_id)
        self.stop_countdown()
        self.checkout.cancel()
        try:
            await self._save(self.cart.state)
        except PersistenceError as e:
            self.log.warning("cart_save_failed_after_release", cart_id=cart_id, error=str(e))

    async def _release_quietly(self, cart_id: str) -> None:
        """Release a hold during compensation; a failure here must not mask the original error."""
        try:
            await self.inventory.release_inventory(cart_id)
        except Exception as e:
            self.log.warning("inventory_release_failed", cart_id=cart_id, error=str(e))

    def _require_owner_state(self) -> CartState:
        state = self.cart.state
        if not state.exists():
            raise AuthenticationRequired()
        return state

    def _expire_session(self, log) -> None:
        log.warning("session_expired")
        self.stop_countdown()
        self.identity_provider.logout()
        self.cart.reset()
        self._notify(NotifyLevel.ERROR, errmsg.SESSION_EXPIRED)

    def _notify(self, level: str, message: str) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(level, message)
        except Exception as e:
            self.log.warning("notification_failed", level=level, error=str(e))
