"""Tests for pickup ticket printing."""

import asyncio

import pytest
from PIL import ImageFont

from moonbeam import printer as ticket_printer
from moonbeam.checkout import place_order
from moonbeam.models import CustomizationRequest
from moonbeam.printer import group_ticket_lines, print_order_ticket, resolve_printer_font_path


class FakePrinter:
    def __init__(self):
        self.images = []
        self.cut_count = 0

    def image(self, img):
        self.images.append(img)

    def cut(self):
        self.cut_count += 1


@pytest.fixture(autouse=True)
def no_pauses(monkeypatch):
    monkeypatch.setattr(ticket_printer, "sleep", lambda seconds: None)


@pytest.fixture
def font():
    return ImageFont.load_default()


class TestGrouping:
    def test_identical_lines_grouped(self, cart, latte, croissant):
        cart.add(latte)
        cart.add(croissant)
        cart.add(latte)
        cart.add(latte, CustomizationRequest(milk="oat"))

        rows = group_ticket_lines(cart.lines)

        assert [(row.name, row.count) for row in rows] == [
            ("Grande Latte", 2),
            ("Grande Oatmilk Latte", 1),
            ("Grande Butter Croissant", 1),
        ]

    def test_quantities_summed(self, cart, latte, chai):
        cart.add(chai)
        cart.add(latte, quantity=2)
        cart.add(latte)

        rows = group_ticket_lines(cart.lines)
        assert [(row.item_id, row.count) for row in rows] == [("caffe-latte", 3), ("chai-latte", 1)]


class TestPrintTicket:
    def test_prints_and_cuts(self, placed_order, font):
        fake = FakePrinter()
        print_order_ticket(placed_order, printer=fake, font=font)

        assert fake.cut_count == 1
        assert len(fake.images) > len(placed_order.items)
        assert all(img.width == 384 for img in fake.images)

    def test_food_separator(self, cart, latte, croissant, card, location, payment, font):
        cart.add(latte)
        cart.add(croissant)
        order = asyncio.run(place_order(cart, 0, card, "Sam", location, payment=payment))

        fake = FakePrinter()
        print_order_ticket(order, printer=fake, font=font)
        stripes = [img for img in fake.images if img.height == 2]
        assert len(stripes) == 10

    def test_empty_order_prints_nothing(self, placed_order, font):
        placed_order.items = ()
        fake = FakePrinter()
        print_order_ticket(placed_order, printer=fake, font=font)
        assert fake.images == []
        assert fake.cut_count == 0


class TestFontPath:
    def test_env_override(self, tmp_path, monkeypatch):
        font_file = tmp_path / "ticket.ttf"
        font_file.write_bytes(b"")
        monkeypatch.setenv("MOONBEAM_PRINTER_FONT_PATH", str(font_file))
        assert resolve_printer_font_path() == str(font_file)

    def test_no_font_found(self, monkeypatch):
        monkeypatch.delenv("MOONBEAM_PRINTER_FONT_PATH", raising=False)
        monkeypatch.setattr(ticket_printer, "PRINTER_FONT_PATH", "/nonexistent/font.ttf")
        monkeypatch.setattr(ticket_printer, "SYSTEM_FONT_CANDIDATES", ())
        with pytest.raises(RuntimeError):
            resolve_printer_font_path()
