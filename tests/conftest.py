"""Pytest fixtures for moonbeam tests."""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from moonbeam.cart import Cart
from moonbeam.checkout import place_order
from moonbeam.data import DEFAULT_CATALOG
from moonbeam.errors import PaymentFailure
from moonbeam.models import CustomizationRequest, PaymentMethod, PaymentType
from moonbeam.persistence import SqliteStore

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start=FIXED_NOW):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakePayment:
    """Payment processor that records charges and optionally declines."""

    def __init__(self, decline_reason=None):
        self.decline_reason = decline_reason
        self.charges = []

    async def charge(self, method, amount):
        self.charges.append((method.method_id, amount))
        if self.decline_reason:
            raise PaymentFailure(method.method_id, self.decline_reason)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def latte(catalog):
    return catalog.get_item("caffe-latte")


@pytest.fixture
def cold_brew(catalog):
    return catalog.get_item("cold-brew")


@pytest.fixture
def chai(catalog):
    return catalog.get_item("chai-latte")


@pytest.fixture
def croissant(catalog):
    return catalog.get_item("butter-croissant")


@pytest.fixture
def location(catalog):
    return catalog.get_location("downtown-main")


@pytest.fixture
def card():
    return PaymentMethod(method_id="pm-visa", type=PaymentType.CARD, last4="4242", brand="Visa")


@pytest.fixture
def payment():
    return FakePayment()


@pytest.fixture
def declining_payment():
    return FakePayment("card declined")


@pytest.fixture
def cart():
    counter = iter(range(1, 1000))
    return Cart(id_factory=lambda: f"line-{next(counter)}")


@pytest.fixture
def three_item_cart(cart, latte, cold_brew, chai):
    """Grande oat latte with an extra shot, venti cold brew and a tall chai."""
    cart.add(latte, CustomizationRequest(size="grande", milk="oat", espresso_shots=1))
    cart.add(cold_brew, CustomizationRequest(size="venti"))
    cart.add(chai, CustomizationRequest(size="tall"))
    assert cart.subtotal() == Decimal("13.45")
    return cart


@pytest.fixture
def store(tmp_path):
    sqlite_store = SqliteStore(tmp_path / "moonbeam.db")
    sqlite_store.bootstrap_schema()
    return sqlite_store


@pytest.fixture
def placed_order(three_item_cart, card, location, payment, clock):
    """A confirmed order for the three-item cart."""
    return asyncio.run(
        place_order(three_item_cart, Decimal("0"), card, "Sam", location, payment=payment, clock=clock)
    )
