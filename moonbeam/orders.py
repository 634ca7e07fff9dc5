"""Order history and the order status state machine."""

from __future__ import annotations

import asyncio
import logging
import math
from datetime import datetime
from typing import Awaitable, Callable, Protocol

from moonbeam.clock import Clock, utc_now
from moonbeam.config import DEFAULT_WAIT_MINUTES, PREPARING_DELAY_SECONDS, READY_WAIT_FRACTION
from moonbeam.errors import InvalidStatusTransition, OrderNotFound
from moonbeam.models import Order, OrderStatus, StatusUpdate, coerce_option

logger = logging.getLogger(__name__)

ORDER_FLOW: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.PICKED_UP,
)
TERMINAL_STATUSES = frozenset({OrderStatus.PICKED_UP, OrderStatus.CANCELLED})
TRACKED_STEPS: tuple[OrderStatus, ...] = (
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.PICKED_UP,
)


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    """
    Forward-only transitions; re-applying the current status is allowed.

    ``cancelled`` is reachable from any non-terminal status, and nothing
    leaves ``picked-up`` or ``cancelled``.
    """
    if current in TERMINAL_STATUSES:
        return False
    if requested is OrderStatus.CANCELLED:
        return True
    return ORDER_FLOW.index(requested) >= ORDER_FLOW.index(current)


def is_active(order: Order) -> bool:
    return order.status not in TERMINAL_STATUSES


def progress_index(order: Order) -> int:
    """Index of the order's status in the tracker steps, -1 when not tracked."""
    if order.status in TRACKED_STEPS:
        return TRACKED_STEPS.index(order.status)
    return -1


def time_remaining_label(order: Order, now: datetime) -> str | None:
    """``~N min`` until the estimated ready time, ``Ready soon`` once it passes."""
    if order.status in {OrderStatus.READY, OrderStatus.PICKED_UP, OrderStatus.CANCELLED}:
        return None
    seconds = (order.estimated_ready_at - now).total_seconds()
    if seconds <= 0:
        return "Ready soon"
    return f"~{math.ceil(seconds / 60)} min"


class OrderRepository(Protocol):
    def save_order(self, order: Order) -> None: ...

    def append_status(self, order_id: str, update: StatusUpdate) -> None: ...


class OrderBook:
    """Session-owned order history, newest first."""

    def __init__(self, store: OrderRepository | None = None, clock: Clock = utc_now):
        self.store = store
        self.clock = clock
        self.current_order: Order | None = None
        self._orders: list[Order] = []

    @property
    def orders(self) -> tuple[Order, ...]:
        return tuple(self._orders)

    def record(self, order: Order) -> None:
        """Add a freshly placed order and make it the current order."""
        self._orders.insert(0, order)
        self.current_order = order
        if self.store is not None:
            self.store.save_order(order)

    def load(self, orders: list[Order]) -> None:
        """Replace history with previously persisted orders (newest first)."""
        self._orders = list(orders)
        self.current_order = self._orders[0] if self._orders else None

    def get(self, order_id: str) -> Order:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        raise OrderNotFound(order_id)

    def update_status(self, order_id: str, status: OrderStatus | str, message: str | None = None) -> Order:
        """
        Append a status change to an order's history.

        Re-applying the current status appends another entry. Backward moves
        and changes after a terminal status raise InvalidStatusTransition.
        """
        order = self.get(order_id)
        requested = coerce_option(OrderStatus, status, "order status")
        if not can_transition(order.status, requested):
            logger.warning(
                "rejected status change order_id=%s from=%s to=%s", order_id, order.status.value, requested.value
            )
            raise InvalidStatusTransition(order_id, order.status.value, requested.value)

        update = StatusUpdate(requested, self.clock(), message)
        order.status = requested
        order.status_history.append(update)
        if self.store is not None:
            self.store.append_status(order_id, update)
        logger.info("order status order_id=%s status=%s", order_id, requested.value)
        return order

    def cancel(self, order_id: str, message: str | None = None) -> Order:
        return self.update_status(order_id, OrderStatus.CANCELLED, message)

    def mark_picked_up(self, order_id: str) -> Order:
        return self.update_status(order_id, OrderStatus.PICKED_UP)

    def active_orders(self) -> list[Order]:
        return [order for order in self._orders if is_active(order)]

    def past_orders(self) -> list[Order]:
        return [order for order in self._orders if not is_active(order)]


async def simulate_preparation(
    book: OrderBook,
    order_id: str,
    preparing_delay: float = PREPARING_DELAY_SECONDS,
    ready_fraction: float = READY_WAIT_FRACTION,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> None:
    """
    Drive an order through ``preparing`` and ``ready`` on timers.

    Stands in for the kitchen: ``preparing`` after ``preparing_delay``
    seconds, ``ready`` once ``ready_fraction`` of the location wait has
    passed since the order was placed. Stops quietly if the order has
    moved on (e.g. was cancelled) in the meantime.
    """
    order = book.get(order_id)
    wait_minutes = order.location.estimated_wait or DEFAULT_WAIT_MINUTES
    ready_after = wait_minutes * 60 * ready_fraction

    await sleep(preparing_delay)
    if not can_transition(order.status, OrderStatus.PREPARING):
        return
    book.update_status(order_id, OrderStatus.PREPARING)

    await sleep(max(0.0, ready_after - preparing_delay))
    if not can_transition(order.status, OrderStatus.READY):
        return
    book.update_status(order_id, OrderStatus.READY)
