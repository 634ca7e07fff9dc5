"""Tests for the Cart aggregate."""

from decimal import Decimal

import pytest

from moonbeam.cart import Cart
from moonbeam.customization import set_syrup_pumps
from moonbeam.errors import InvalidOption, UnsupportedOption
from moonbeam.models import CustomizationRequest, DrinkCustomization, MilkType, Size, SyrupFlavor, SyrupSelection, Temperature
from moonbeam.pricing import round_money


class TestCartAdd:
    def test_add_prices_and_names_line(self, cart, latte):
        line = cart.add(latte, CustomizationRequest(milk="oat", espresso_shots=1))

        assert line.line_id == "line-1"
        assert line.unit_price == Decimal("5.45")
        assert line.name == "Grande Oatmilk +1 Shot Latte"
        assert cart.item_count == 1

    def test_duplicate_adds_stay_separate(self, cart, latte):
        first = cart.add(latte)
        second = cart.add(latte)

        assert len(cart) == 2
        assert first.line_id != second.line_id
        assert first.customization == second.customization

    def test_quantity_must_be_positive(self, cart, latte):
        with pytest.raises(ValueError):
            cart.add(latte, quantity=0)
        assert cart.is_empty

    @pytest.mark.parametrize("quantity", [1.5, 2.0, True, "2"])
    def test_quantity_must_be_whole(self, cart, latte, quantity):
        with pytest.raises(ValueError):
            cart.add(latte, quantity=quantity)
        assert cart.is_empty
        assert cart.subtotal() == Decimal("0")

    def test_unsupported_option_leaves_cart_empty(self, cart, cold_brew):
        with pytest.raises(UnsupportedOption):
            cart.add(cold_brew, CustomizationRequest(temperature="hot"))
        assert cart.is_empty


class TestCartEdits:
    def test_update_quantity(self, cart, latte):
        line = cart.add(latte)
        cart.update_quantity(line.line_id, 3)

        assert cart.item_count == 3
        assert cart.subtotal() == Decimal("11.25")

    @pytest.mark.parametrize("quantity", [2.5, False, None])
    def test_update_quantity_rejects_non_whole(self, cart, latte, quantity):
        line = cart.add(latte)
        with pytest.raises(ValueError):
            cart.update_quantity(line.line_id, quantity)
        assert line.quantity == 1
        assert cart.subtotal() == Decimal("3.75")

    def test_update_quantity_zero_removes(self, cart, latte, chai):
        line = cart.add(latte)
        cart.add(chai)
        cart.update_quantity(line.line_id, 0)

        assert [l.menu_item.item_id for l in cart] == ["chai-latte"]

    def test_remove_unknown_is_noop(self, cart, latte):
        cart.add(latte)
        cart.remove("nope")
        assert len(cart) == 1

    def test_update_customization_reprices(self, cart, latte):
        line = cart.add(latte)
        updated = set_syrup_pumps(line.customization, "vanilla", 6)
        result = cart.update_customization(line.line_id, updated)

        assert result is line
        assert line.unit_price == Decimal("4.35")
        assert line.customization.syrups == (SyrupSelection(SyrupFlavor.VANILLA, 6),)
        assert line.name == "Grande Latte"

    def test_update_customization_unknown_line(self, cart, latte):
        c = DrinkCustomization(size=Size.TALL, temperature=Temperature.HOT)
        assert cart.update_customization("nope", c) is None

    def test_failed_update_leaves_line_untouched(self, cart, cold_brew):
        line = cart.add(cold_brew)
        before = (line.customization, line.unit_price, line.name)
        bad = DrinkCustomization(size=Size.GRANDE, temperature=Temperature.HOT)

        with pytest.raises(UnsupportedOption):
            cart.update_customization(line.line_id, bad)
        assert (line.customization, line.unit_price, line.name) == before

    def test_invalid_milk_leaves_line_untouched(self, cart, latte):
        line = cart.add(latte)
        bad = DrinkCustomization(size=Size.GRANDE, temperature=Temperature.HOT, milk="camel")

        with pytest.raises(InvalidOption):
            cart.update_customization(line.line_id, bad)
        assert line.customization.milk is MilkType.TWO_PERCENT

    def test_clear(self, three_item_cart):
        three_item_cart.clear()
        assert three_item_cart.is_empty
        assert three_item_cart.subtotal() == Decimal("0")


class TestCartTotals:
    def test_three_item_totals(self, three_item_cart):
        assert three_item_cart.subtotal() == Decimal("13.45")
        assert round_money(three_item_cart.tax()) == Decimal("1.18")
        assert round_money(three_item_cart.total()) == Decimal("14.63")

    def test_totals_follow_edits(self, three_item_cart):
        line = three_item_cart.lines[1]
        three_item_cart.update_quantity(line.line_id, 2)
        assert three_item_cart.subtotal() == Decimal("17.70")

    def test_snapshot_is_detached(self, three_item_cart):
        snapshot = three_item_cart.snapshot()
        three_item_cart.update_quantity(snapshot[0].line_id, 5)
        assert snapshot[0].quantity == 1

    def test_custom_tax_rate(self, latte):
        cart = Cart(tax_rate="0.10")
        cart.add(latte)
        assert cart.tax() == Decimal("0.375")
