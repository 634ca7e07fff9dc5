"""Tests for CafeSession."""

import asyncio
from decimal import Decimal

import pytest
from PIL import ImageFont

from moonbeam.errors import CheckoutInProgress, LocationClosed, OrderNotFound, PaymentFailure, PermissionDenied
from moonbeam.models import CustomizationRequest, OrderStatus
from moonbeam.session import CafeSession


class GatedPayment:
    """Holds every charge until ``release`` is set."""

    def __init__(self):
        self.release = asyncio.Event()

    async def charge(self, method, amount):
        await self.release.wait()


@pytest.fixture
def session(payment, clock):
    return CafeSession(payment=payment, clock=clock)


def fill_cart(session):
    session.add_to_cart("caffe-latte", CustomizationRequest(milk="oat", espresso_shots=1))
    session.add_to_cart("cold-brew", CustomizationRequest(size="venti"))
    session.add_to_cart("chai-latte", CustomizationRequest(size="tall"))


class TestSessionCart:
    def test_defaults_to_first_open_location(self, session):
        assert session.selected_location.location_id == "downtown-main"

    def test_select_closed_location(self, session):
        with pytest.raises(LocationClosed):
            session.select_location("verona")
        assert session.selected_location.location_id == "downtown-main"

    def test_cart_operations(self, session):
        line = session.add_to_cart("caffe-latte", quantity=2)
        session.update_cart_item_quantity(line.line_id, 3)
        assert session.cart.item_count == 3
        session.remove_from_cart(line.line_id)
        assert session.cart.is_empty


class TestSessionCheckout:
    def test_place_order_records_history(self, session, card, clock):
        fill_cart(session)
        order = asyncio.run(session.place_order(Decimal("0"), card, "Sam"))

        assert session.orders.current_order is order
        assert session.cart.is_empty
        assert not session.checkout_in_flight
        assert session.orders.get(order.order_id).status is OrderStatus.CONFIRMED

    def test_signed_in_checkout_credits_stars(self, session, card):
        user = session.login("robin@example.com")
        fill_cart(session)
        order = asyncio.run(session.place_order(Decimal("0"), card, "Robin"))

        assert order.user_id == user.user_id
        assert user.order_ids == [order.order_id]
        assert user.rewards.stars == 29

    def test_second_checkout_rejected_while_in_flight(self, card, clock):
        gate = GatedPayment()
        session = CafeSession(payment=gate, clock=clock)
        fill_cart(session)

        async def run():
            first = asyncio.create_task(session.place_order(Decimal("0"), card, "Sam"))
            await asyncio.sleep(0)
            assert session.checkout_in_flight
            with pytest.raises(CheckoutInProgress):
                await session.place_order(Decimal("0"), card, "Sam")
            gate.release.set()
            return await first

        order = asyncio.run(run())
        assert order.item_count == 3
        assert not session.checkout_in_flight

    def test_failed_checkout_resets_flag(self, card, clock, declining_payment):
        session = CafeSession(payment=declining_payment, clock=clock)
        fill_cart(session)
        with pytest.raises(PaymentFailure):
            asyncio.run(session.place_order(Decimal("0"), card, "Sam"))
        assert not session.checkout_in_flight
        assert len(session.cart) == 3
        assert session.orders.orders == ()

    def test_track_runs_preparation(self, session, card):
        fill_cart(session)

        async def run():
            order = await session.place_order(Decimal("0"), card, "Sam")
            await session.track(order, preparing_delay=0, ready_fraction=0)
            return order

        order = asyncio.run(run())
        assert order.status is OrderStatus.READY


class TestSessionFavorites:
    def test_requires_sign_in(self, session):
        with pytest.raises(PermissionDenied):
            session.toggle_favorite("caffe-latte")

    def test_favorites_persist(self, store, payment, clock):
        session = CafeSession(store=store, payment=payment, clock=clock)
        session.login("robin@example.com")
        assert session.toggle_favorite("caffe-latte") is True

        fresh = CafeSession(store=store, payment=payment, clock=clock)
        user = fresh.login("robin@example.com")
        assert user.favorite_items == ["caffe-latte"]

    def test_login_loads_saved_orders(self, store, payment, clock, card):
        session = CafeSession(store=store, payment=payment, clock=clock)
        session.login("robin@example.com")
        fill_cart(session)
        order = asyncio.run(session.place_order(Decimal("0"), card, "Robin"))

        fresh = CafeSession(store=store, payment=payment, clock=clock)
        fresh.login("robin@example.com")
        assert [o.order_id for o in fresh.orders.orders] == [order.order_id]


class TestSessionAfterPayment:
    def test_failed_save_keeps_paid_order(self, payment, clock, card):
        class BrokenStore:
            def load_users(self):
                return []

            def save_user(self, user):
                pass

            def list_favorites(self, user_id):
                return []

            def load_orders(self, catalog, user_id=None):
                return []

            def save_order(self, order):
                raise OSError("disk full")

        session = CafeSession(store=BrokenStore(), payment=payment, clock=clock)
        user = session.login("robin@example.com")
        fill_cart(session)

        order = asyncio.run(session.place_order(Decimal("0"), card, "Robin"))

        assert session.orders.current_order is order
        assert user.order_ids == [order.order_id]
        assert user.rewards.stars == 29
        assert session.cart.is_empty

    def test_print_ticket(self, session, card):
        class TicketPrinter:
            def __init__(self):
                self.images = []
                self.cut_count = 0

            def image(self, img):
                self.images.append(img)

            def cut(self):
                self.cut_count += 1

        fill_cart(session)
        order = asyncio.run(session.place_order(Decimal("0"), card, "Sam"))
        printer = TicketPrinter()

        printed = session.print_ticket(order.order_id, printer=printer, font=ImageFont.load_default())

        assert printed is order
        assert printer.cut_count == 1
        assert printer.images

    def test_print_unknown_order(self, session):
        with pytest.raises(OrderNotFound):
            session.print_ticket("ORD-MISSING", printer=object(), font=object())
