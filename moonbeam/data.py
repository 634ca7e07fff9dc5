"""Static menu and location data."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from moonbeam.constant import LOCATIONS_RAW, MENU_ITEMS_RAW
from moonbeam.errors import InvalidOption
from moonbeam.models import CustomizationRequest, Location, MenuItem, Size, Temperature, coerce_option

FOOD_CATEGORIES = ("pastries", "sandwiches", "snacks", "desserts")


def _menu_item_from_raw(raw: dict[str, object]) -> MenuItem:
    item_id = str(raw["id"])
    sizes = tuple(coerce_option(Size, size, "size") for size in raw["sizes"])  # type: ignore[union-attr]
    temperatures = tuple(
        coerce_option(Temperature, temp, "temperature") for temp in raw["temperatures"]  # type: ignore[union-attr]
    )
    if not sizes or not temperatures:
        raise InvalidOption("menu item", item_id, "needs at least one size and temperature")
    base_price = Decimal(str(raw["base_price"]))
    if base_price < 0:
        raise InvalidOption("base price", base_price, f"{item_id} price must not be negative")
    caffeine = raw.get("caffeine")
    return MenuItem(
        item_id=item_id,
        name=str(raw["name"]),
        description=str(raw["description"]),
        category=str(raw["category"]),
        base_price=base_price,
        calories=dict(raw["calories"]),  # type: ignore[call-overload]
        caffeine=dict(caffeine) if caffeine is not None else None,  # type: ignore[call-overload]
        available_sizes=sizes,
        available_temperatures=temperatures,
        default_customization=CustomizationRequest.from_dict(raw.get("defaults") or {}),  # type: ignore[arg-type]
        is_food=bool(raw.get("is_food", False)),
        is_new=bool(raw.get("is_new", False)),
        is_seasonal=bool(raw.get("is_seasonal", False)),
        tags=tuple(raw.get("tags") or ()),  # type: ignore[arg-type]
    )


def _location_from_raw(raw: dict[str, object]) -> Location:
    return Location(
        location_id=str(raw["id"]),
        name=str(raw["name"]),
        address=str(raw["address"]),
        estimated_wait=int(raw["estimated_wait"]),  # type: ignore[call-overload]
        is_open=bool(raw["is_open"]),
        hours=str(raw["hours"]),
        distance=str(raw["distance"]) if raw.get("distance") is not None else None,
    )


MENU_ITEMS: list[MenuItem] = [_menu_item_from_raw(raw) for raw in MENU_ITEMS_RAW]
LOCATIONS: list[Location] = [_location_from_raw(raw) for raw in LOCATIONS_RAW]


class Catalog:
    """Read-only menu and location lookups, loaded once at startup."""

    def __init__(self, items: Iterable[MenuItem], locations: Iterable[Location]):
        self.items: tuple[MenuItem, ...] = tuple(items)
        self.locations: tuple[Location, ...] = tuple(locations)
        self._items_by_id = {item.item_id: item for item in self.items}
        self._locations_by_id = {location.location_id: location for location in self.locations}

    def get_item(self, item_id: str) -> MenuItem:
        """Look up a menu item by id."""
        try:
            return self._items_by_id[item_id]
        except KeyError:
            raise InvalidOption("menu item", item_id) from None

    def get_location(self, location_id: str) -> Location:
        try:
            return self._locations_by_id[location_id]
        except KeyError:
            raise InvalidOption("location", location_id) from None

    def categories(self) -> list[str]:
        """Categories in first-seen menu order."""
        seen: list[str] = []
        for item in self.items:
            if item.category not in seen:
                seen.append(item.category)
        return seen

    def items_in_category(self, category: str) -> list[MenuItem]:
        return [item for item in self.items if item.category == category]

    def drinks(self) -> list[MenuItem]:
        return [item for item in self.items if not item.is_food]

    def food(self) -> list[MenuItem]:
        return [item for item in self.items if item.is_food]

    def featured_items(self) -> list[MenuItem]:
        return [item for item in self.items if "favorite" in item.tags]

    def new_items(self) -> list[MenuItem]:
        return [item for item in self.items if item.is_new]

    def seasonal_items(self) -> list[MenuItem]:
        return [item for item in self.items if item.is_seasonal]

    def search(self, query: str) -> list[MenuItem]:
        """Case-insensitive match on name, description and tags."""
        q = query.strip().lower()
        if not q:
            return list(self.items)
        return [
            item
            for item in self.items
            if q in item.name.lower() or q in item.description.lower() or any(q in tag for tag in item.tags)
        ]

    def open_locations(self) -> list[Location]:
        return [location for location in self.locations if location.is_open]


DEFAULT_CATALOG = Catalog(MENU_ITEMS, LOCATIONS)
