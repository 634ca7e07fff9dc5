"""Tests for the order status state machine and order history."""

import asyncio
from datetime import timedelta

import pytest

from moonbeam.errors import InvalidOption, InvalidStatusTransition, OrderNotFound
from moonbeam.models import OrderStatus
from moonbeam.orders import (
    OrderBook,
    can_transition,
    progress_index,
    simulate_preparation,
    time_remaining_label,
)


@pytest.fixture
def book(placed_order, clock):
    order_book = OrderBook(clock=clock)
    order_book.record(placed_order)
    return order_book


class TestCanTransition:
    def test_forward_moves(self):
        assert can_transition(OrderStatus.CONFIRMED, OrderStatus.PREPARING)
        assert can_transition(OrderStatus.CONFIRMED, OrderStatus.READY)
        assert can_transition(OrderStatus.READY, OrderStatus.PICKED_UP)

    def test_same_status_allowed(self):
        assert can_transition(OrderStatus.PREPARING, OrderStatus.PREPARING)

    def test_backward_rejected(self):
        assert not can_transition(OrderStatus.READY, OrderStatus.PREPARING)

    def test_cancel_from_any_open_status(self):
        for status in (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.READY):
            assert can_transition(status, OrderStatus.CANCELLED)

    def test_terminal_statuses_are_final(self):
        for terminal in (OrderStatus.PICKED_UP, OrderStatus.CANCELLED):
            for status in OrderStatus:
                assert not can_transition(terminal, status)


class TestOrderBook:
    def test_record_sets_current(self, book, placed_order):
        assert book.current_order is placed_order
        assert book.orders == (placed_order,)

    def test_update_status_appends_history(self, book, placed_order, clock):
        clock.advance(minutes=2)
        book.update_status(placed_order.order_id, "preparing", "On the bar")

        assert placed_order.status is OrderStatus.PREPARING
        last = placed_order.status_history[-1]
        assert last.status is OrderStatus.PREPARING
        assert last.timestamp == clock.now
        assert last.message == "On the bar"

    def test_repeated_status_appends_again(self, book, placed_order):
        book.update_status(placed_order.order_id, OrderStatus.PREPARING)
        book.update_status(placed_order.order_id, OrderStatus.PREPARING)

        statuses = [u.status for u in placed_order.status_history]
        assert statuses == [
            OrderStatus.PENDING,
            OrderStatus.CONFIRMED,
            OrderStatus.PREPARING,
            OrderStatus.PREPARING,
        ]

    def test_backward_move_rejected(self, book, placed_order):
        book.update_status(placed_order.order_id, OrderStatus.READY)
        with pytest.raises(InvalidStatusTransition):
            book.update_status(placed_order.order_id, OrderStatus.PREPARING)
        assert placed_order.status is OrderStatus.READY
        assert len(placed_order.status_history) == 3

    def test_no_change_after_pickup(self, book, placed_order):
        book.mark_picked_up(placed_order.order_id)
        with pytest.raises(InvalidStatusTransition):
            book.cancel(placed_order.order_id)

    def test_unknown_status(self, book, placed_order):
        with pytest.raises(InvalidOption):
            book.update_status(placed_order.order_id, "lost")

    def test_unknown_order(self, book):
        with pytest.raises(OrderNotFound):
            book.get("ORD-MISSING")

    def test_active_and_past(self, book, placed_order):
        assert book.active_orders() == [placed_order]
        book.cancel(placed_order.order_id)
        assert book.active_orders() == []
        assert book.past_orders() == [placed_order]

    def test_store_receives_updates(self, placed_order, clock):
        class RecordingStore:
            def __init__(self):
                self.saved = []
                self.updates = []

            def save_order(self, order):
                self.saved.append(order.order_id)

            def append_status(self, order_id, update):
                self.updates.append((order_id, update.status))

        repo = RecordingStore()
        order_book = OrderBook(store=repo, clock=clock)
        order_book.record(placed_order)
        order_book.update_status(placed_order.order_id, OrderStatus.PREPARING)

        assert repo.saved == [placed_order.order_id]
        assert repo.updates == [(placed_order.order_id, OrderStatus.PREPARING)]


class TestTracking:
    def test_progress_index(self, book, placed_order):
        assert progress_index(placed_order) == 0
        book.update_status(placed_order.order_id, OrderStatus.READY)
        assert progress_index(placed_order) == 2

    def test_progress_index_cancelled(self, book, placed_order):
        book.cancel(placed_order.order_id)
        assert progress_index(placed_order) == -1

    def test_time_remaining_label(self, placed_order, clock):
        assert time_remaining_label(placed_order, clock.now) == "~8 min"
        assert time_remaining_label(placed_order, clock.now + timedelta(minutes=7, seconds=30)) == "~1 min"
        assert time_remaining_label(placed_order, clock.now + timedelta(minutes=9)) == "Ready soon"

    def test_no_label_once_ready(self, book, placed_order, clock):
        book.update_status(placed_order.order_id, OrderStatus.READY)
        assert time_remaining_label(placed_order, clock.now) is None


class TestSimulatePreparation:
    def test_moves_to_preparing_then_ready(self, book, placed_order):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        asyncio.run(simulate_preparation(book, placed_order.order_id, preparing_delay=3, sleep=fake_sleep))

        assert placed_order.status is OrderStatus.READY
        assert [u.status for u in placed_order.status_history][-2:] == [OrderStatus.PREPARING, OrderStatus.READY]
        assert delays == [3, 8 * 60 * 0.8 - 3]

    def test_stops_when_cancelled(self, book, placed_order):
        async def cancel_while_waiting(seconds):
            if placed_order.status is not OrderStatus.CANCELLED:
                book.cancel(placed_order.order_id)

        asyncio.run(simulate_preparation(book, placed_order.order_id, sleep=cancel_while_waiting))

        assert placed_order.status is OrderStatus.CANCELLED
        assert OrderStatus.PREPARING not in [u.status for u in placed_order.status_history]
