"""Drink price calculation.

Prices are additive over the item's base price:

1. size surcharge
2. milk surcharge (house milks are free)
3. extra espresso shots
4. syrups: the first flavor is included up to ``INCLUDED_SYRUP_PUMPS`` pumps;
   every other flavor, or a first flavor pumped beyond that, is charged its
   flat per-flavor price (not scaled by pumps)
5. toppings, with ``extra`` charged at 1.5x
6. sweeteners, charged per packet

Counts outside the customization limits raise InvalidOption, so the
result is never negative. No rounding happens here; values are rounded
where they are displayed or persisted (see :func:`round_money`).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from moonbeam.config import TAX_RATE
from moonbeam.constant import (
    EXTRA_SHOT_PRICE,
    MILK_PRICES,
    SIZE_PRICES,
    SWEETENER_PRICES,
    SYRUP_PRICES,
    TOPPING_PRICES,
)
from moonbeam.errors import InvalidOption
from moonbeam.models import (
    MAX_ESPRESSO_SHOTS,
    MAX_SWEETENER_PACKETS,
    MAX_SYRUP_PUMPS,
    DrinkCustomization,
    SweetenerSelection,
    SyrupSelection,
    ToppingAmount,
    ToppingSelection,
    check_count,
    option_key,
)

CENT = Decimal("0.01")
INCLUDED_SYRUP_PUMPS = 4
EXTRA_TOPPING_MULTIPLIER = Decimal("1.5")


def _decimal_table(raw: dict[str, str]) -> dict[str, Decimal]:
    return {key: Decimal(value) for key, value in raw.items()}


SIZE_SURCHARGES = _decimal_table(SIZE_PRICES)
MILK_SURCHARGES = _decimal_table(MILK_PRICES)
SYRUP_SURCHARGES = _decimal_table(SYRUP_PRICES)
TOPPING_SURCHARGES = _decimal_table(TOPPING_PRICES)
SWEETENER_SURCHARGES = _decimal_table(SWEETENER_PRICES)
EXTRA_SHOT_SURCHARGE = Decimal(EXTRA_SHOT_PRICE)
DEFAULT_TAX_RATE = Decimal(TAX_RATE)


def to_money(value: Any) -> Decimal:
    """Convert an int/str/float/Decimal amount into a Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _lookup(table: dict[str, Decimal], value: Any, kind: str) -> Decimal:
    key = option_key(value)
    try:
        return table[key]
    except (KeyError, TypeError):
        raise InvalidOption(kind, key) from None


def size_surcharge(size: Any) -> Decimal:
    return _lookup(SIZE_SURCHARGES, size, "size")


def milk_surcharge(milk: Any) -> Decimal:
    if milk is None:
        return Decimal("0")
    return _lookup(MILK_SURCHARGES, milk, "milk")


def shots_surcharge(shots: int) -> Decimal:
    return EXTRA_SHOT_SURCHARGE * check_count("espresso shots", shots, MAX_ESPRESSO_SHOTS)


def syrup_charge(selection: SyrupSelection, index: int) -> Decimal:
    """Charge for the syrup at ``index`` in insertion order."""
    price = _lookup(SYRUP_SURCHARGES, selection.flavor, "syrup")
    check_count("syrup pumps", selection.pumps, MAX_SYRUP_PUMPS)
    if index == 0 and selection.pumps <= INCLUDED_SYRUP_PUMPS:
        return Decimal("0")
    return price


def topping_charge(selection: ToppingSelection) -> Decimal:
    price = _lookup(TOPPING_SURCHARGES, selection.topping, "topping")
    amount = option_key(selection.amount)
    if amount not in {level.value for level in ToppingAmount}:
        raise InvalidOption("topping amount", amount)
    if amount == ToppingAmount.EXTRA.value:
        return price * EXTRA_TOPPING_MULTIPLIER
    return price


def sweetener_charge(selection: SweetenerSelection) -> Decimal:
    packets = check_count("sweetener packets", selection.packets, MAX_SWEETENER_PACKETS)
    return _lookup(SWEETENER_SURCHARGES, selection.sweetener, "sweetener") * packets


def compute_price(base_price: Any, customization: DrinkCustomization) -> Decimal:
    """Return the unit price of a drink with ``customization`` applied."""
    price = to_money(base_price)
    if price < 0:
        raise InvalidOption("base price", base_price, "must not be negative")

    price += size_surcharge(customization.size)
    price += milk_surcharge(customization.milk)
    price += shots_surcharge(customization.espresso_shots)
    for index, syrup in enumerate(customization.syrups):
        price += syrup_charge(syrup, index)
    for topping in customization.toppings:
        price += topping_charge(topping)
    for sweetener in customization.sweeteners:
        price += sweetener_charge(sweetener)
    return price


def tax_for(subtotal: Decimal, rate: Decimal = DEFAULT_TAX_RATE) -> Decimal:
    return subtotal * rate
