"""Per-session ordering state: cart, orders, location and signed-in user."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

from moonbeam.accounts import User, UserDirectory
from moonbeam.cart import Cart
from moonbeam.checkout import PaymentProcessor, place_order
from moonbeam.clock import Clock, utc_now
from moonbeam.config import PAYMENT_TIMEOUT_SECONDS, PREPARING_DELAY_SECONDS, READY_WAIT_FRACTION
from moonbeam.data import DEFAULT_CATALOG, Catalog
from moonbeam.errors import CheckoutInProgress, LocationClosed, PermissionDenied
from moonbeam.models import (
    CartLineItem,
    CustomizationRequest,
    DrinkCustomization,
    Location,
    Order,
    OrderStatus,
    PaymentMethod,
)
from moonbeam.orders import OrderBook, simulate_preparation
from moonbeam.persistence import SqliteStore
from moonbeam.printer import print_order_ticket

logger = logging.getLogger(__name__)


class CafeSession:
    """
    Owns the cart and order history for one application session.

    Nothing here is shared across sessions; callers run it on a single
    event loop. Checkout is exclusive: a second ``place_order`` while one is
    in flight raises CheckoutInProgress.
    """

    def __init__(
        self,
        catalog: Catalog = DEFAULT_CATALOG,
        users: UserDirectory | None = None,
        store: SqliteStore | None = None,
        payment: PaymentProcessor | None = None,
        clock: Clock = utc_now,
        payment_timeout: float | None = PAYMENT_TIMEOUT_SECONDS,
    ):
        self.catalog = catalog
        self.store = store
        if users is None:
            users = UserDirectory(store.load_users() if store is not None else None, store=store, clock=clock)
        self.users = users
        self.payment = payment
        self.clock = clock
        self.payment_timeout = payment_timeout
        self.cart = Cart()
        self.orders = OrderBook(store=store, clock=clock)
        self.user: User | None = None
        open_locations = catalog.open_locations()
        self.selected_location: Location | None = open_locations[0] if open_locations else None
        self._checkout_in_flight = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def checkout_in_flight(self) -> bool:
        return self._checkout_in_flight

    def login(self, email: str) -> User:
        self.user = self.users.login(email)
        if self.store is not None:
            self.user.favorite_items = self.store.list_favorites(self.user.user_id)
            self.orders.load(self.store.load_orders(self.catalog, self.user.user_id))
        return self.user

    def logout(self) -> None:
        self.user = None

    def select_location(self, location_id: str) -> Location:
        location = self.catalog.get_location(location_id)
        if not location.is_open:
            raise LocationClosed(location_id)
        self.selected_location = location
        return location

    def add_to_cart(
        self,
        item_id: str,
        customization: CustomizationRequest | DrinkCustomization | None = None,
        quantity: int = 1,
    ) -> CartLineItem:
        return self.cart.add(self.catalog.get_item(item_id), customization, quantity)

    def remove_from_cart(self, line_id: str) -> None:
        self.cart.remove(line_id)

    def update_cart_item_quantity(self, line_id: str, quantity: int) -> None:
        self.cart.update_quantity(line_id, quantity)

    def update_cart_item(self, line_id: str, customization: DrinkCustomization) -> CartLineItem | None:
        return self.cart.update_customization(line_id, customization)

    def clear_cart(self) -> None:
        self.cart.clear()

    async def place_order(self, tip: Decimal | str | int, payment_method: PaymentMethod, pickup_name: str) -> Order:
        """Check out the session cart at the selected location."""
        if self._checkout_in_flight:
            raise CheckoutInProgress()
        self._checkout_in_flight = True
        try:
            order = await place_order(
                self.cart,
                tip,
                payment_method,
                pickup_name,
                self.selected_location,
                payment=self.payment,
                clock=self.clock,
                user_id=self.user.user_id if self.user else None,
                loyalty=self.users if self.user else None,
                timeout=self.payment_timeout,
            )
        finally:
            self._checkout_in_flight = False

        if self.user is not None:
            self.user.order_ids.insert(0, order.order_id)
        try:
            self.orders.record(order)
        except Exception:
            # Recorded in memory before the store is called; only the save failed.
            logger.exception("could not save order order_id=%s", order.order_id)
        return order

    def print_ticket(self, order_id: str, printer: Any = None, font: Any = None) -> Order:
        """Print the pickup ticket for one of this session's orders."""
        order = self.orders.get(order_id)
        print_order_ticket(order, printer=printer, font=font)
        return order

    def track(
        self,
        order: Order,
        preparing_delay: float = PREPARING_DELAY_SECONDS,
        ready_fraction: float = READY_WAIT_FRACTION,
    ) -> asyncio.Task[None]:
        """Start the simulated kitchen for ``order`` on the running loop."""
        return asyncio.create_task(
            simulate_preparation(self.orders, order.order_id, preparing_delay, ready_fraction)
        )

    def update_order_status(self, order_id: str, status: OrderStatus | str, message: str | None = None) -> Order:
        return self.orders.update_status(order_id, status, message)

    def toggle_favorite(self, item_id: str) -> bool:
        """Toggle a menu item in the signed-in user's favorites."""
        if self.user is None:
            raise PermissionDenied("save favorites", "sign in first")
        self.catalog.get_item(item_id)
        is_favorite = self.user.toggle_favorite(item_id)
        if self.store is not None:
            if is_favorite:
                self.store.add_favorite(self.user.user_id, item_id)
            else:
                self.store.remove_favorite(self.user.user_id, item_id)
        return is_favorite
