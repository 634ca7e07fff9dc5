"""Checkout: payment, order creation and loyalty accrual."""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import timedelta
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Callable, Protocol
from uuid import uuid4

from moonbeam.cart import Cart
from moonbeam.clock import Clock, utc_now
from moonbeam.config import (
    DEFAULT_WAIT_MINUTES,
    LOYALTY_STARS_PER_DOLLAR,
    PAYMENT_DELAY_SECONDS,
    PAYMENT_TIMEOUT_SECONDS,
)
from moonbeam.constant import TIP_PERCENT_PRESETS
from moonbeam.errors import EmptyCartCheckout, LocationClosed, MissingLocation, PaymentFailure, PaymentTimeout
from moonbeam.models import Location, Order, OrderStatus, PaymentMethod, PaymentType, StatusUpdate
from moonbeam.pricing import to_money

logger = logging.getLogger(__name__)


def new_order_id() -> str:
    return f"ORD-{uuid4().hex[:12].upper()}"


def tip_for_percentage(subtotal: Decimal, percent: int) -> Decimal:
    """Tip for one of the preset percentages of the subtotal."""
    if percent not in TIP_PERCENT_PRESETS:
        raise ValueError(f"tip percentage must be one of {TIP_PERCENT_PRESETS}")
    return subtotal * percent / 100


def stars_for_total(total: Decimal) -> int:
    """Loyalty stars earned for an order total: floor(total x 2)."""
    return int((to_money(total) * LOYALTY_STARS_PER_DOLLAR).to_integral_value(rounding=ROUND_FLOOR))


def detect_card_brand(number: str) -> str:
    cleaned = re.sub(r"\s", "", number)
    if cleaned.startswith("4"):
        return "Visa"
    if re.match(r"^5[1-5]", cleaned):
        return "Mastercard"
    if re.match(r"^3[47]", cleaned):
        return "Amex"
    if cleaned.startswith("6011") or cleaned.startswith("65"):
        return "Discover"
    return "Card"


def card_from_number(number: str, method_id: str = "new-card") -> PaymentMethod:
    """Build a one-off card payment method from a typed card number."""
    digits = re.sub(r"\D", "", number)[:16]
    if len(digits) < 4:
        raise ValueError("card number must have at least 4 digits")
    return PaymentMethod(method_id=method_id, type=PaymentType.CARD, last4=digits[-4:], brand=detect_card_brand(digits))


class PaymentProcessor(Protocol):
    async def charge(self, method: PaymentMethod, amount: Decimal) -> None: ...


class LoyaltyLedger(Protocol):
    def credit_stars(self, user_id: str, stars: int) -> Any: ...


class SimulatedPaymentProcessor:
    """Stands in for a payment gateway: waits, then approves or declines."""

    def __init__(self, delay_seconds: float = PAYMENT_DELAY_SECONDS, decline_reason: str | None = None):
        self.delay_seconds = delay_seconds
        self.decline_reason = decline_reason

    async def charge(self, method: PaymentMethod, amount: Decimal) -> None:
        await asyncio.sleep(self.delay_seconds)
        if self.decline_reason:
            raise PaymentFailure(method.method_id, self.decline_reason)
        if method.type is PaymentType.MOONBEAM_CARD and method.balance is not None and method.balance < amount:
            raise PaymentFailure(method.method_id, "insufficient card balance")


async def place_order(
    cart: Cart,
    tip: Decimal | str | int,
    payment_method: PaymentMethod,
    pickup_name: str,
    location: Location | None,
    *,
    payment: PaymentProcessor | None = None,
    clock: Clock = utc_now,
    user_id: str | None = None,
    loyalty: LoyaltyLedger | None = None,
    timeout: float | None = PAYMENT_TIMEOUT_SECONDS,
    order_id_factory: Callable[[], str] = new_order_id,
) -> Order:
    """
    Charge the cart and return the order snapshot.

    Totals are taken from the cart when this is called. The cart is cleared
    only after payment succeeds; on failure, timeout or cancellation it is
    left exactly as it was.
    """
    if cart.is_empty:
        raise EmptyCartCheckout()
    if location is None:
        raise MissingLocation()
    if not location.is_open:
        raise LocationClosed(location.location_id)
    tip = to_money(tip)
    if tip < 0:
        raise ValueError("tip must not be negative")

    created_at = clock()
    items = cart.snapshot()
    subtotal = cart.subtotal()
    tax = cart.tax()
    total = subtotal + tax + tip

    processor = payment or SimulatedPaymentProcessor()
    try:
        await asyncio.wait_for(processor.charge(payment_method, total), timeout)
    except asyncio.TimeoutError:
        logger.warning("payment timed out method=%s timeout=%s", payment_method.method_id, timeout)
        raise PaymentTimeout(payment_method.method_id, timeout or 0) from None
    except PaymentFailure as exc:
        logger.warning("payment declined method=%s reason=%s", payment_method.method_id, exc.reason)
        raise

    order = Order(
        order_id=order_id_factory(),
        items=items,
        subtotal=subtotal,
        tax=tax,
        tip=tip,
        total=total,
        location=location,
        status=OrderStatus.CONFIRMED,
        status_history=[
            StatusUpdate(OrderStatus.PENDING, created_at),
            StatusUpdate(OrderStatus.CONFIRMED, created_at),
        ],
        created_at=created_at,
        estimated_ready_at=created_at + timedelta(minutes=location.estimated_wait or DEFAULT_WAIT_MINUTES),
        pickup_name=pickup_name.strip(),
        payment_method=payment_method,
        user_id=user_id,
    )
    cart.clear()
    logger.info("order placed order_id=%s items=%d total=%s", order.order_id, len(items), total)

    if user_id is not None and loyalty is not None:
        stars = stars_for_total(total)
        # Payment has succeeded; ledger errors are logged, not raised.
        try:
            loyalty.credit_stars(user_id, stars)
        except Exception:
            logger.exception("could not credit stars order_id=%s user_id=%s stars=%d", order.order_id, user_id, stars)
        else:
            logger.info("credited stars user_id=%s stars=%d", user_id, stars)
    return order
