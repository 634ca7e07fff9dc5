"""Display names, money formatting and rich summaries."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from rich.text import Text

from moonbeam.constant import DEFAULT_MILKS, MILK_NAME_LABELS, SIZE_LABELS
from moonbeam.errors import InvalidOption
from moonbeam.models import (
    CartLineItem,
    DrinkCustomization,
    MenuItem,
    Order,
    OrderStatus,
    Temperature,
    ToppingAmount,
    option_key,
)
from moonbeam.pricing import round_money

if TYPE_CHECKING:
    from moonbeam.cart import Cart

_OPTION_LABEL_OVERRIDES = {
    "2percent": "2% Milk",
    "no-ice": "No Ice",
    "picked-up": "Picked Up",
}

STATUS_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.CONFIRMED: "Order Confirmed",
    OrderStatus.PREPARING: "Preparing",
    OrderStatus.READY: "Ready for Pickup",
    OrderStatus.PICKED_UP: "Picked Up",
    OrderStatus.CANCELLED: "Cancelled",
}


def generate_name(item: MenuItem, customization: DrinkCustomization) -> str:
    """
    Build the order-line label for a customized item.

    Token order is fixed: size, "Iced", milk (non-house milks only),
    "+N Shot(s)", then the item name.
    """
    size_key = option_key(customization.size)
    try:
        parts = [SIZE_LABELS[size_key]]
    except KeyError:
        raise InvalidOption("size", size_key) from None

    if customization.temperature == Temperature.ICED:
        parts.append("Iced")

    milk = option_key(customization.milk)
    if milk and milk not in DEFAULT_MILKS:
        parts.append(MILK_NAME_LABELS.get(milk, ""))

    shots = customization.espresso_shots
    if shots and shots > 0:
        parts.append(f"+{shots} Shot{'s' if shots > 1 else ''}")

    parts.append(item.name)
    return " ".join(part for part in parts if part)


def format_money(amount: Decimal) -> str:
    return f"${round_money(amount):,.2f}"


def option_label(value: Any) -> str:
    """Human label for an option key, e.g. ``white-mocha`` -> ``White Mocha``."""
    key = str(option_key(value))
    if key in _OPTION_LABEL_OVERRIDES:
        return _OPTION_LABEL_OVERRIDES[key]
    return key.replace("-", " ").title()


def describe_customization(customization: DrinkCustomization) -> list[str]:
    """List the customization choices beyond size, in display order."""
    notes: list[str] = []
    if customization.temperature == Temperature.BLENDED:
        notes.append("Blended")
    if customization.milk is not None:
        label = option_label(customization.milk)
        notes.append(label if "milk" in label.lower() else f"{label} Milk")
    if customization.espresso_roast is not None:
        notes.append(f"{option_label(customization.espresso_roast)} Roast")
    if customization.espresso_shots:
        shots = customization.espresso_shots
        notes.append(f"+{shots} Shot{'s' if shots > 1 else ''}")
    for syrup in customization.syrups:
        notes.append(f"{option_label(syrup.flavor)} x{syrup.pumps}")
    for topping in customization.toppings:
        if topping.amount == ToppingAmount.REGULAR:
            notes.append(option_label(topping.topping))
        else:
            notes.append(f"{option_label(topping.amount)} {option_label(topping.topping)}")
    for sweetener in customization.sweeteners:
        notes.append(f"{option_label(sweetener.sweetener)} x{sweetener.packets}")
    if customization.ice_level is not None and customization.ice_level.value != "regular":
        label = option_label(customization.ice_level)
        notes.append(label if label == "No Ice" else f"{label} Ice")
    if customization.instructions:
        notes.append(f'"{customization.instructions}"')
    return notes


def status_badge_style(status: OrderStatus) -> str:
    """Return a consistent badge style for order statuses."""
    if status in {OrderStatus.PENDING, OrderStatus.CONFIRMED}:
        return "bold #ffffff on #2f6db5"
    if status is OrderStatus.PREPARING:
        return "bold #1e1b4b on #f59e0b"
    if status is OrderStatus.READY:
        return "bold #0b1f0f on #5fbf72"
    if status is OrderStatus.CANCELLED:
        return "bold #ffffff on #b23a48"
    return "bold #ffffff on #64748b"


def format_status(status: OrderStatus) -> Text:
    return Text(f" {STATUS_LABELS[status]} ", style=status_badge_style(status))


def format_line_item(line: CartLineItem) -> Text:
    """Render a cart line with its quantity, price and customization tags."""
    text = Text()
    text.append(f"{line.quantity}x ", style="bold")
    text.append(line.name)
    text.append(f"  {format_money(line.line_total)}", style="bold")
    notes = describe_customization(line.customization)
    if notes:
        text.append("\n    ")
        for idx, note in enumerate(notes):
            if idx > 0:
                text.append(" ")
            text.append(f"[{note}]", style="dim")
    return text


def _totals(text: Text, rows: list[tuple[str, Decimal]]) -> None:
    for label, amount in rows:
        style = "bold" if label == "Total" else ""
        text.append(f"\n{label:<10}{format_money(amount):>12}", style=style)


def format_cart(cart: Cart) -> Text:
    text = Text()
    if not len(cart):
        text.append("(cart is empty)", style="dim")
        return text
    for idx, line in enumerate(cart.lines):
        if idx > 0:
            text.append("\n")
        text.append_text(format_line_item(line))
    text.append("\n")
    _totals(text, [("Subtotal", cart.subtotal()), ("Tax", cart.tax()), ("Total", cart.total())])
    return text


def format_ready_time(moment: datetime) -> str:
    return moment.strftime("%I:%M %p").lstrip("0")


def format_order(order: Order) -> Text:
    """Render an order receipt: header, lines, totals and status."""
    text = Text()
    text.append(f"Order #{order.short_id}", style="bold")
    text.append(f"  {order.location.name}\n")
    text.append(f"Pickup: {order.pickup_name}  Ready ~{format_ready_time(order.estimated_ready_at)}  ")
    text.append_text(format_status(order.status))
    for line in order.items:
        text.append("\n")
        text.append_text(format_line_item(line))
    text.append("\n")
    rows = [("Subtotal", order.subtotal), ("Tax", order.tax)]
    if order.tip > 0:
        rows.append(("Tip", order.tip))
    rows.append(("Total", order.total))
    _totals(text, rows)
    if order.payment_method is not None:
        text.append(f"\nPaid with {order.payment_method.label}", style="dim")
    return text
