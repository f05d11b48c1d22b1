"""Shared pytest fixtures for stonecart tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from stonecart.adapters.memory import (
    CollectingNotifier,
    InMemoryCartRepository,
    InMemoryInventory,
    StaticIdentityProvider,
)
from stonecart.cart import AddItem, CartAggregate
from stonecart.checkout import ReservationStateMachine
from stonecart.config import BusinessConfig
from stonecart.log import configure_logging
from stonecart.ports import Identity
from stonecart.session import CartSession

configure_logging("WARNING", json_output=False)

GRANITE_STEP = "64b7f0c2a1e4d5f6a7b8c9d0"
COBBLE = "64b7f0c2a1e4d5f6a7b8c9d1"


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def add_step(crate_qty: int = 1, piece_qty: int = 3, weight: str = "40", product_ref=GRANITE_STEP) -> AddItem:
    """Ten pieces per crate at 100 per piece."""
    return AddItem(
        product_ref=product_ref,
        crate_qty=crate_qty,
        piece_qty=piece_qty,
        pieces_per_crate=10,
        unit_price=Decimal("100"),
        weight_per_piece=Decimal(weight),
        name="Blue Mist Granite Step",
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def config():
    return BusinessConfig()


@pytest.fixture
def identity():
    return Identity(
        user_id="user-1",
        tier=None,
        name="Asha Rao",
        email="asha@example.com",
        phone="98765 43210",
        address="12 Quarry Road",
    )


@pytest.fixture
def identity_provider(identity):
    return StaticIdentityProvider(identity)


@pytest.fixture
def aggregate(identity_provider, config, clock):
    return CartAggregate(identity_provider, config, clock)


@pytest.fixture
def machine(aggregate, config, clock):
    return ReservationStateMachine(aggregate, config=config, clock=clock)


@pytest.fixture
def repository():
    return InMemoryCartRepository()


@pytest.fixture
def inventory(clock):
    return InMemoryInventory(clock=clock)


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def session(identity_provider, repository, inventory, notifier, config, clock):
    return CartSession(identity_provider, repository, inventory, notifier, config, clock)
