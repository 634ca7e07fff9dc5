"""Cart aggregate."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Callable, Iterator
from uuid import uuid4

from moonbeam.customization import normalize, validate
from moonbeam.models import CartLineItem, CustomizationRequest, DrinkCustomization, MenuItem
from moonbeam.pricing import DEFAULT_TAX_RATE, compute_price, tax_for, to_money
from moonbeam.rendering import generate_name


def _require_whole(quantity: object) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValueError(f"quantity must be a whole number, got {quantity!r}")


class Cart:
    """
    Ordered collection of cart lines, insertion order is display order.

    Every ``add`` creates a new line even when an identical line exists, so
    each instance stays independently editable. Totals are derived on every
    read and never rounded here.
    """

    def __init__(self, tax_rate: Decimal | str | None = None, id_factory: Callable[[], str] | None = None):
        self.tax_rate = DEFAULT_TAX_RATE if tax_rate is None else to_money(tax_rate)
        self._new_line_id = id_factory or (lambda: uuid4().hex)
        self._lines: list[CartLineItem] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(list(self._lines))

    @property
    def lines(self) -> tuple[CartLineItem, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def get(self, line_id: str) -> CartLineItem | None:
        for line in self._lines:
            if line.line_id == line_id:
                return line
        return None

    def add(
        self,
        item: MenuItem,
        customization: CustomizationRequest | DrinkCustomization | None = None,
        quantity: int = 1,
    ) -> CartLineItem:
        """Normalize, price and append a new line."""
        _require_whole(quantity)
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        normalized = normalize(item, customization)
        line = CartLineItem(
            line_id=self._new_line_id(),
            menu_item=item,
            customization=normalized,
            quantity=quantity,
            unit_price=compute_price(item.base_price, normalized),
            name=generate_name(item, normalized),
        )
        self._lines.append(line)
        return line

    def remove(self, line_id: str) -> None:
        """Delete a line; unknown ids are ignored."""
        self._lines = [line for line in self._lines if line.line_id != line_id]

    def update_quantity(self, line_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        _require_whole(quantity)
        if quantity <= 0:
            self.remove(line_id)
            return
        line = self.get(line_id)
        if line is not None:
            line.quantity = quantity

    def update_customization(self, line_id: str, customization: DrinkCustomization) -> CartLineItem | None:
        """Replace a line's customization, re-pricing from the line's own menu item."""
        line = self.get(line_id)
        if line is None:
            return None
        # Compute everything before touching the line so a failure leaves it as-is.
        normalized = validate(line.menu_item, customization)
        unit_price = compute_price(line.menu_item.base_price, normalized)
        name = generate_name(line.menu_item, normalized)
        line.customization = normalized
        line.unit_price = unit_price
        line.name = name
        return line

    def clear(self) -> None:
        self._lines.clear()

    def subtotal(self) -> Decimal:
        return sum((line.unit_price * line.quantity for line in self._lines), Decimal("0"))

    def tax(self) -> Decimal:
        return tax_for(self.subtotal(), self.tax_rate)

    def total(self) -> Decimal:
        return self.subtotal() + self.tax()

    def snapshot(self) -> tuple[CartLineItem, ...]:
        """Copies of the current lines, detached from later cart edits."""
        return tuple(replace(line) for line in self._lines)
