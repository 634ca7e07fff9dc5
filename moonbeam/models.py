"""Domain models for cafe ordering."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, TypeVar

from moonbeam.errors import InvalidOption


class Size(str, Enum):
    TALL = "tall"
    GRANDE = "grande"
    VENTI = "venti"


class Temperature(str, Enum):
    HOT = "hot"
    ICED = "iced"
    BLENDED = "blended"


class MilkType(str, Enum):
    WHOLE = "whole"
    SKIM = "skim"
    TWO_PERCENT = "2percent"
    OAT = "oat"
    ALMOND = "almond"
    SOY = "soy"
    COCONUT = "coconut"
    OATMILK_FOAM = "oatmilk-foam"


class EspressoRoast(str, Enum):
    SIGNATURE = "signature"
    BLONDE = "blonde"
    DECAF = "decaf"


class SyrupFlavor(str, Enum):
    VANILLA = "vanilla"
    CARAMEL = "caramel"
    HAZELNUT = "hazelnut"
    MOCHA = "mocha"
    WHITE_MOCHA = "white-mocha"
    TOFFEE_NUT = "toffee-nut"
    PEPPERMINT = "peppermint"
    RASPBERRY = "raspberry"
    CINNAMON_DOLCE = "cinnamon-dolce"
    BROWN_SUGAR = "brown-sugar"
    LAVENDER = "lavender"
    PISTACHIO = "pistachio"


class Topping(str, Enum):
    WHIPPED_CREAM = "whipped-cream"
    CARAMEL_DRIZZLE = "caramel-drizzle"
    MOCHA_DRIZZLE = "mocha-drizzle"
    CINNAMON_POWDER = "cinnamon-powder"
    VANILLA_POWDER = "vanilla-powder"
    COLD_FOAM = "cold-foam"
    SALTED_CREAM_FOAM = "salted-cream-foam"
    CHOCOLATE_CURLS = "chocolate-curls"
    COOKIE_CRUMBLES = "cookie-crumbles"


class ToppingAmount(str, Enum):
    LIGHT = "light"
    REGULAR = "regular"
    EXTRA = "extra"


class SweetenerType(str, Enum):
    CLASSIC_SYRUP = "classic-syrup"
    LIQUID_CANE_SUGAR = "liquid-cane-sugar"
    HONEY = "honey"
    STEVIA = "stevia"
    SPLENDA = "splenda"
    RAW_SUGAR = "raw-sugar"


class IceLevel(str, Enum):
    NO_ICE = "no-ice"
    LIGHT = "light"
    REGULAR = "regular"
    EXTRA = "extra"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    PICKED_UP = "picked-up"
    CANCELLED = "cancelled"


class PaymentType(str, Enum):
    CARD = "card"
    MOONBEAM_CARD = "moonbeam-card"
    APPLE_PAY = "apple-pay"
    GOOGLE_PAY = "google-pay"


E = TypeVar("E", bound=Enum)

MAX_ESPRESSO_SHOTS = 6
MAX_SYRUP_PUMPS = 12
MAX_SWEETENER_PACKETS = 12


def option_key(value: Any) -> Any:
    """Return the raw table key for an enum member or plain value."""
    if isinstance(value, Enum):
        return value.value
    return value


def coerce_option(enum_cls: type[E], value: Any, kind: str) -> E:
    """Coerce a raw value into ``enum_cls`` or raise InvalidOption."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(option_key(value))
    except ValueError:
        raise InvalidOption(kind, value) from None


def check_count(kind: str, value: Any, maximum: int) -> int:
    """Return ``value`` if it is a whole number in ``0..maximum``, else raise InvalidOption."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOption(kind, value, "must be a whole number")
    if not (0 <= value <= maximum):
        raise InvalidOption(kind, value, f"must be between 0 and {maximum}")
    return value


def _coerce_optional(enum_cls: type[E], value: Any, kind: str) -> E | None:
    if value is None:
        return None
    return coerce_option(enum_cls, value, kind)


@dataclass(frozen=True)
class SyrupSelection:
    flavor: SyrupFlavor
    pumps: int


@dataclass(frozen=True)
class ToppingSelection:
    topping: Topping
    amount: ToppingAmount = ToppingAmount.REGULAR


@dataclass(frozen=True)
class SweetenerSelection:
    sweetener: SweetenerType
    packets: int


def _field(entry: Any, key: str, kind: str) -> Any:
    try:
        return entry[key]
    except (KeyError, TypeError):
        raise InvalidOption(kind, entry, f"missing '{key}'") from None


def _syrups_from_raw(raw: Any) -> tuple[SyrupSelection, ...]:
    return tuple(
        SyrupSelection(
            coerce_option(SyrupFlavor, _field(entry, "flavor", "syrup"), "syrup"),
            check_count("syrup pumps", _field(entry, "pumps", "syrup"), MAX_SYRUP_PUMPS),
        )
        for entry in raw
    )


def _toppings_from_raw(raw: Any) -> tuple[ToppingSelection, ...]:
    return tuple(
        ToppingSelection(
            coerce_option(Topping, _field(entry, "topping", "topping"), "topping"),
            coerce_option(ToppingAmount, entry.get("amount", "regular"), "topping amount"),
        )
        for entry in raw
    )


def _sweeteners_from_raw(raw: Any) -> tuple[SweetenerSelection, ...]:
    return tuple(
        SweetenerSelection(
            coerce_option(SweetenerType, _field(entry, "type", "sweetener"), "sweetener"),
            check_count("sweetener packets", _field(entry, "packets", "sweetener"), MAX_SWEETENER_PACKETS),
        )
        for entry in raw
    )


@dataclass(frozen=True)
class DrinkCustomization:
    """A fully-populated drink customization.

    Replaced wholesale on edit. Syrups, toppings and sweeteners hold at most
    one entry per key, in insertion order, and never an entry at zero.
    """

    size: Size
    temperature: Temperature
    milk: MilkType | None = None
    espresso_roast: EspressoRoast | None = None
    espresso_shots: int = 0
    syrups: tuple[SyrupSelection, ...] = ()
    toppings: tuple[ToppingSelection, ...] = ()
    sweeteners: tuple[SweetenerSelection, ...] = ()
    ice_level: IceLevel | None = None
    instructions: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size.value,
            "temperature": self.temperature.value,
            "milk": option_key(self.milk),
            "espresso_roast": option_key(self.espresso_roast),
            "espresso_shots": self.espresso_shots,
            "syrups": [{"flavor": s.flavor.value, "pumps": s.pumps} for s in self.syrups],
            "toppings": [{"topping": t.topping.value, "amount": t.amount.value} for t in self.toppings],
            "sweeteners": [{"type": s.sweetener.value, "packets": s.packets} for s in self.sweeteners],
            "ice_level": option_key(self.ice_level),
            "instructions": self.instructions,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> DrinkCustomization:
        return cls(
            size=coerce_option(Size, raw.get("size"), "size"),
            temperature=coerce_option(Temperature, raw.get("temperature"), "temperature"),
            milk=_coerce_optional(MilkType, raw.get("milk"), "milk"),
            espresso_roast=_coerce_optional(EspressoRoast, raw.get("espresso_roast"), "espresso roast"),
            espresso_shots=check_count("espresso shots", raw.get("espresso_shots") or 0, MAX_ESPRESSO_SHOTS),
            syrups=_syrups_from_raw(raw.get("syrups") or []),
            toppings=_toppings_from_raw(raw.get("toppings") or []),
            sweeteners=_sweeteners_from_raw(raw.get("sweeteners") or []),
            ice_level=_coerce_optional(IceLevel, raw.get("ice_level"), "ice level"),
            instructions=raw.get("instructions"),
        )


@dataclass(frozen=True)
class CustomizationRequest:
    """A partial customization; unset fields are filled in by normalization."""

    size: Size | str | None = None
    temperature: Temperature | str | None = None
    milk: MilkType | str | None = None
    espresso_roast: EspressoRoast | str | None = None
    espresso_shots: int | None = None
    syrups: tuple[SyrupSelection, ...] | None = None
    toppings: tuple[ToppingSelection, ...] | None = None
    sweeteners: tuple[SweetenerSelection, ...] | None = None
    ice_level: IceLevel | str | None = None
    instructions: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> CustomizationRequest:
        syrups = raw.get("syrups")
        toppings = raw.get("toppings")
        sweeteners = raw.get("sweeteners")
        return cls(
            size=_coerce_optional(Size, raw.get("size"), "size"),
            temperature=_coerce_optional(Temperature, raw.get("temperature"), "temperature"),
            milk=_coerce_optional(MilkType, raw.get("milk"), "milk"),
            espresso_roast=_coerce_optional(EspressoRoast, raw.get("espresso_roast"), "espresso roast"),
            espresso_shots=raw.get("espresso_shots"),
            syrups=_syrups_from_raw(syrups) if syrups is not None else None,
            toppings=_toppings_from_raw(toppings) if toppings is not None else None,
            sweeteners=_sweeteners_from_raw(sweeteners) if sweeteners is not None else None,
            ice_level=_coerce_optional(IceLevel, raw.get("ice_level"), "ice level"),
            instructions=raw.get("instructions"),
        )


@dataclass(frozen=True)
class MenuItem:
    """A static catalog entry."""

    item_id: str
    name: str
    description: str
    category: str
    base_price: Decimal
    calories: dict[str, int]
    available_sizes: tuple[Size, ...]
    available_temperatures: tuple[Temperature, ...]
    default_customization: CustomizationRequest = field(default_factory=CustomizationRequest)
    caffeine: dict[str, int] | None = None
    is_food: bool = False
    is_new: bool = False
    is_seasonal: bool = False
    tags: tuple[str, ...] = ()

    def calories_for(self, size: Size) -> int | None:
        return self.calories.get(size.value)

    def caffeine_for(self, size: Size) -> int | None:
        if self.caffeine is None:
            return None
        return self.caffeine.get(size.value)


@dataclass(frozen=True)
class Location:
    """A pickup location."""

    location_id: str
    name: str
    address: str
    estimated_wait: int
    is_open: bool
    hours: str
    distance: str | None = None


@dataclass(frozen=True)
class PaymentMethod:
    method_id: str
    type: PaymentType
    last4: str | None = None
    brand: str | None = None
    balance: Decimal | None = None
    is_default: bool = False

    @property
    def label(self) -> str:
        if self.type is PaymentType.MOONBEAM_CARD:
            return "Moonbeam Card"
        if self.type is PaymentType.APPLE_PAY:
            return "Apple Pay"
        if self.type is PaymentType.GOOGLE_PAY:
            return "Google Pay"
        brand = self.brand or "Card"
        if self.last4:
            return f"{brand} ending {self.last4}"
        return brand


@dataclass
class CartLineItem:
    """One cart line. The unit price is frozen when the line is added or edited."""

    line_id: str
    menu_item: MenuItem
    customization: DrinkCustomization
    quantity: int
    unit_price: Decimal
    name: str

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class StatusUpdate:
    status: OrderStatus
    timestamp: datetime
    message: str | None = None


@dataclass
class Order:
    """Snapshot of a cart at checkout. Only status and history change afterwards."""

    order_id: str
    items: tuple[CartLineItem, ...]
    subtotal: Decimal
    tax: Decimal
    tip: Decimal
    total: Decimal
    location: Location
    status: OrderStatus
    status_history: list[StatusUpdate]
    created_at: datetime
    estimated_ready_at: datetime
    pickup_name: str
    payment_method: PaymentMethod | None = None
    user_id: str | None = None

    @property
    def short_id(self) -> str:
        return self.order_id.split("-", 1)[-1]

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)
