"""Customization normalization and editing."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from moonbeam.errors import UnsupportedOption
from moonbeam.models import (
    MAX_ESPRESSO_SHOTS,
    MAX_SWEETENER_PACKETS,
    MAX_SYRUP_PUMPS,
    CustomizationRequest,
    DrinkCustomization,
    EspressoRoast,
    IceLevel,
    MenuItem,
    MilkType,
    Size,
    SweetenerSelection,
    SweetenerType,
    SyrupFlavor,
    SyrupSelection,
    Temperature,
    Topping,
    ToppingAmount,
    ToppingSelection,
    check_count,
    coerce_option,
)

GLOBAL_DEFAULT_SIZE = Size.GRANDE
TOPPING_NONE = "none"


def _pick(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _upsert(entries: list[Any], key_of: Any, entry: Any) -> None:
    """Replace the entry with the same key in place, or append it."""
    key = key_of(entry)
    for idx, existing in enumerate(entries):
        if key_of(existing) == key:
            entries[idx] = entry
            return
    entries.append(entry)


def _normalize_syrups(raw: Iterable[SyrupSelection]) -> tuple[SyrupSelection, ...]:
    entries: list[SyrupSelection] = []
    for syrup in raw:
        flavor = coerce_option(SyrupFlavor, syrup.flavor, "syrup")
        pumps = check_count("syrup pumps", syrup.pumps, MAX_SYRUP_PUMPS)
        entry = SyrupSelection(flavor, pumps)
        if pumps == 0:
            entries = [e for e in entries if e.flavor is not flavor]
            continue
        _upsert(entries, lambda e: e.flavor, entry)
    return tuple(entries)


def _normalize_toppings(raw: Iterable[ToppingSelection]) -> tuple[ToppingSelection, ...]:
    entries: list[ToppingSelection] = []
    for topping in raw:
        entry = ToppingSelection(
            coerce_option(Topping, topping.topping, "topping"),
            coerce_option(ToppingAmount, topping.amount, "topping amount"),
        )
        _upsert(entries, lambda e: e.topping, entry)
    return tuple(entries)


def _normalize_sweeteners(raw: Iterable[SweetenerSelection]) -> tuple[SweetenerSelection, ...]:
    entries: list[SweetenerSelection] = []
    for sweetener in raw:
        kind = coerce_option(SweetenerType, sweetener.sweetener, "sweetener")
        packets = check_count("sweetener packets", sweetener.packets, MAX_SWEETENER_PACKETS)
        if packets == 0:
            entries = [e for e in entries if e.sweetener is not kind]
            continue
        _upsert(entries, lambda e: e.sweetener, SweetenerSelection(kind, packets))
    return tuple(entries)


def _build(item: MenuItem, **fields: Any) -> DrinkCustomization:
    size = coerce_option(Size, fields["size"], "size")
    if size not in item.available_sizes:
        raise UnsupportedOption(item.item_id, "size", size.value, [s.value for s in item.available_sizes])
    temperature = coerce_option(Temperature, fields["temperature"], "temperature")
    if temperature not in item.available_temperatures:
        raise UnsupportedOption(
            item.item_id, "temperature", temperature.value, [t.value for t in item.available_temperatures]
        )

    milk = fields["milk"]
    roast = fields["espresso_roast"]
    ice_level = fields["ice_level"]
    instructions = fields["instructions"]
    if instructions is not None:
        instructions = str(instructions).strip() or None

    return DrinkCustomization(
        size=size,
        temperature=temperature,
        milk=coerce_option(MilkType, milk, "milk") if milk is not None else None,
        espresso_roast=coerce_option(EspressoRoast, roast, "espresso roast") if roast is not None else None,
        espresso_shots=check_count("espresso shots", fields["espresso_shots"] or 0, MAX_ESPRESSO_SHOTS),
        syrups=_normalize_syrups(fields["syrups"] or ()),
        toppings=_normalize_toppings(fields["toppings"] or ()),
        sweeteners=_normalize_sweeteners(fields["sweeteners"] or ()),
        ice_level=coerce_option(IceLevel, ice_level, "ice level") if ice_level is not None else None,
        instructions=instructions,
    )


def _fallback_size(item: MenuItem) -> Size:
    if GLOBAL_DEFAULT_SIZE in item.available_sizes:
        return GLOBAL_DEFAULT_SIZE
    return item.available_sizes[0]


def normalize(
    item: MenuItem, requested: CustomizationRequest | DrinkCustomization | None = None
) -> DrinkCustomization:
    """
    Produce a fully-populated customization for ``item``.

    Unset request fields are taken from the item's default customization,
    then from global defaults (grande, the item's first temperature). A
    ``DrinkCustomization`` is validated as-is without applying defaults.

    Raises UnsupportedOption when the size or temperature is not offered,
    and InvalidOption for keys or counts outside the catalog tables.
    """
    if isinstance(requested, DrinkCustomization):
        return validate(item, requested)

    request = requested or CustomizationRequest()
    defaults = item.default_customization
    return _build(
        item,
        size=_pick(request.size, defaults.size, _fallback_size(item)),
        temperature=_pick(request.temperature, defaults.temperature, item.available_temperatures[0]),
        milk=_pick(request.milk, defaults.milk),
        espresso_roast=_pick(request.espresso_roast, defaults.espresso_roast),
        espresso_shots=_pick(request.espresso_shots, defaults.espresso_shots, 0),
        syrups=_pick(request.syrups, defaults.syrups, ()),
        toppings=_pick(request.toppings, defaults.toppings, ()),
        sweeteners=_pick(request.sweeteners, defaults.sweeteners, ()),
        ice_level=_pick(request.ice_level, defaults.ice_level),
        instructions=request.instructions,
    )


def validate(item: MenuItem, customization: DrinkCustomization) -> DrinkCustomization:
    """Re-check a full customization against ``item`` and the option tables."""
    return _build(
        item,
        size=customization.size,
        temperature=customization.temperature,
        milk=customization.milk,
        espresso_roast=customization.espresso_roast,
        espresso_shots=customization.espresso_shots,
        syrups=customization.syrups,
        toppings=customization.toppings,
        sweeteners=customization.sweeteners,
        ice_level=customization.ice_level,
        instructions=customization.instructions,
    )


def set_syrup_pumps(customization: DrinkCustomization, flavor: SyrupFlavor | str, pumps: int) -> DrinkCustomization:
    """Return a copy with ``flavor`` set to ``pumps``; zero or less removes it."""
    flavor = coerce_option(SyrupFlavor, flavor, "syrup")
    entries = list(customization.syrups)
    if pumps <= 0:
        entries = [e for e in entries if e.flavor is not flavor]
    else:
        _upsert(entries, lambda e: e.flavor, SyrupSelection(flavor, check_count("syrup pumps", pumps, MAX_SYRUP_PUMPS)))
    return replace(customization, syrups=tuple(entries))


def set_topping(
    customization: DrinkCustomization, topping: Topping | str, amount: ToppingAmount | str | None
) -> DrinkCustomization:
    """Return a copy with ``topping`` at ``amount``; ``None`` or ``"none"`` removes it."""
    topping = coerce_option(Topping, topping, "topping")
    entries = list(customization.toppings)
    if amount is None or amount == TOPPING_NONE:
        entries = [e for e in entries if e.topping is not topping]
    else:
        _upsert(entries, lambda e: e.topping, ToppingSelection(topping, coerce_option(ToppingAmount, amount, "topping amount")))
    return replace(customization, toppings=tuple(entries))


def set_sweetener_packets(
    customization: DrinkCustomization, sweetener: SweetenerType | str, packets: int
) -> DrinkCustomization:
    """Return a copy with ``sweetener`` set to ``packets``; zero or less removes it."""
    sweetener = coerce_option(SweetenerType, sweetener, "sweetener")
    entries = list(customization.sweeteners)
    if packets <= 0:
        entries = [e for e in entries if e.sweetener is not sweetener]
    else:
        _upsert(
            entries,
            lambda e: e.sweetener,
            SweetenerSelection(sweetener, check_count("sweetener packets", packets, MAX_SWEETENER_PACKETS)),
        )
    return replace(customization, sweeteners=tuple(entries))


def with_options(item: MenuItem, customization: DrinkCustomization, **changes: Any) -> DrinkCustomization:
    """Return a validated copy of ``customization`` with scalar fields replaced."""
    return validate(item, replace(customization, **changes))


def syrup_pumps(customization: DrinkCustomization, flavor: SyrupFlavor | str) -> int:
    flavor = coerce_option(SyrupFlavor, flavor, "syrup")
    return next((s.pumps for s in customization.syrups if s.flavor is flavor), 0)


def topping_amount(customization: DrinkCustomization, topping: Topping | str) -> str:
    topping = coerce_option(Topping, topping, "topping")
    return next((t.amount.value for t in customization.toppings if t.topping is topping), TOPPING_NONE)


def sweetener_packets(customization: DrinkCustomization, sweetener: SweetenerType | str) -> int:
    sweetener = coerce_option(SweetenerType, sweetener, "sweetener")
    return next((s.packets for s in customization.sweeteners if s.sweetener is sweetener), 0)
