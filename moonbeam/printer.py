"""Pickup tickets for the bar's ESC/POS thermal printer.

Each ticket is a stack of 1-bit Pillow images: a header with the pickup
name and order number, one line per distinct drink (identical lines are
counted, not repeated), its customization notes, then food under a
black rule.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from time import sleep
from typing import Any, Iterator, Sequence

from moonbeam.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_SINGLE_ITEM_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from moonbeam.models import CartLineItem, DrinkCustomization, Order
from moonbeam.rendering import describe_customization

logger = logging.getLogger(__name__)

FONT_PATH_ENV = "MOONBEAM_PRINTER_FONT_PATH"
SYSTEM_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)

# Food rule: a 5px bar centred in 20px, sent 2px at a time with a short
# pause so the head does not overheat and smear the bar.
_RULE_CANVAS_PX = 20
_RULE_BAR_PX = 5
_RULE_CHUNK_PX = 2
_RULE_CHUNK_PAUSE_S = 0.1

_ITEM_PADDING_PX = 20
_NOTE_PADDING_PX = 6
_NOTE_INDENT = "    "
_ORDER_NUMBER_GUTTER_PX = 8


@dataclass
class TicketRow:
    item_id: str
    name: str
    is_food: bool
    customization: DrinkCustomization
    count: int
    first_seen: int

    @property
    def label(self) -> str:
        return self.name if self.count == 1 else f"{self.count}x {self.name}"

    def notes(self) -> list[str]:
        if not self.is_food:
            return describe_customization(self.customization)
        if self.customization.instructions:
            return [f'"{self.customization.instructions}"']
        return []


def _font_candidates() -> Iterator[str]:
    override = os.environ.get(FONT_PATH_ENV, "").strip()
    if override:
        yield override
    yield PRINTER_FONT_PATH
    yield from SYSTEM_FONT_CANDIDATES


def resolve_printer_font_path() -> str:
    """
    First existing font file among: the MOONBEAM_PRINTER_FONT_PATH override,
    PRINTER_FONT_PATH, then common Linux system fonts.
    """
    tried = list(dict.fromkeys(path for path in _font_candidates() if path))
    for path in tried:
        if Path(path).is_file():
            return path
    raise RuntimeError(f"No ticket font available; set {FONT_PATH_ENV}. Looked in: {', '.join(tried)}")


def check_printer_dependencies() -> tuple[bool, str]:
    """Report whether a ticket could be printed on this machine."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except (ImportError, OSError, RuntimeError) as exc:
        return (False, f"Ticket printing unavailable: {exc}")
    return (True, "Ticket printer ready")


def _blank(height: int) -> Any:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height)), color=1)


def _measure(text: str, font: Any) -> tuple[int, int, int]:
    """Width, height and top offset of ``text`` as drawn with ``font``."""
    from PIL import Image, ImageDraw

    left, top, right, bottom = ImageDraw.Draw(Image.new("1", (1, 1))).textbbox((0, 0), text, font=font)
    return (right - left, bottom - top, top)


def _truncate(text: str, font: Any, max_px: int) -> str:
    if _measure(text, font)[0] <= max_px:
        return text
    for end in range(len(text) - 1, 0, -1):
        shortened = text[:end].rstrip() + "..."
        if _measure(shortened, font)[0] <= max_px:
            return shortened
    return "..."


def _text_row(text: str, font: Any, padding: int) -> Any:
    from PIL import ImageDraw

    _, height, top = _measure(text, font)
    img = _blank(max(12, height + padding))
    # Shift by the bbox top so descenders stay on the canvas.
    ImageDraw.Draw(img).text((PRINTER_LEFT_INDENT_PX, (img.height - height) // 2 - top), text, font=font, fill=0)
    return img


def _header(order: Order, font: Any) -> Any:
    """Pickup name on the left, last four of the order number on the right."""
    from PIL import ImageDraw

    number = f"#{order.short_id[-4:]}"
    number_w, number_h, number_top = _measure(number, font)
    name_room = PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX - number_w - 3 * _ORDER_NUMBER_GUTTER_PX
    name = _truncate(order.pickup_name or "Guest", font, max(40, name_room))
    _, name_h, name_top = _measure(name, font)

    img = _blank(max(26, max(name_h, number_h) + 16))
    draw = ImageDraw.Draw(img)
    draw.text((PRINTER_LEFT_INDENT_PX, 4 - name_top), name, font=font, fill=0)
    draw.text((PRINTER_WIDTH_PX - _ORDER_NUMBER_GUTTER_PX - number_w, 4 - number_top), number, font=font, fill=0)
    return img


def _food_rule_chunks() -> Iterator[Any]:
    from PIL import ImageDraw

    rule = _blank(_RULE_CANVAS_PX)
    bar_top = (_RULE_CANVAS_PX - _RULE_BAR_PX) // 2
    ImageDraw.Draw(rule).rectangle((0, bar_top, PRINTER_WIDTH_PX - 1, bar_top + _RULE_BAR_PX - 1), fill=0)
    for y in range(0, _RULE_CANVAS_PX, _RULE_CHUNK_PX):
        yield rule.crop((0, y, PRINTER_WIDTH_PX, min(_RULE_CANVAS_PX, y + _RULE_CHUNK_PX)))


def _print_food_rule(printer: Any) -> None:
    chunks = list(_food_rule_chunks())
    for idx, chunk in enumerate(chunks):
        printer.image(chunk)
        if idx < len(chunks) - 1:
            sleep(_RULE_CHUNK_PAUSE_S)


def group_ticket_lines(lines: Sequence[CartLineItem]) -> list[TicketRow]:
    """
    Collapse lines with the same menu item and customization into one row.

    Drinks come before food; within each, bigger counts first, then the
    order the line was first added.
    """
    rows: dict[tuple[str, DrinkCustomization], TicketRow] = {}
    for position, line in enumerate(lines):
        key = (line.menu_item.item_id, line.customization)
        if key in rows:
            rows[key].count += line.quantity
        else:
            rows[key] = TicketRow(
                item_id=line.menu_item.item_id,
                name=line.name,
                is_food=line.menu_item.is_food,
                customization=line.customization,
                count=line.quantity,
                first_seen=position,
            )
    return sorted(rows.values(), key=lambda row: (row.is_food, -row.count, row.first_seen))


def _note_font(font: Any) -> Any:
    try:
        return font.font_variant(size=max(12, PRINTER_FONT_SIZE * 2 // 3))
    except AttributeError:
        return font


def _open_printer() -> Any:
    try:
        from escpos.printer import Usb
    except ImportError as exc:
        raise RuntimeError(f"python-escpos is not installed: {exc}") from exc
    return Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)


def _load_font() -> Any:
    try:
        from PIL import ImageFont
    except ImportError as exc:
        raise RuntimeError(f"Pillow is not installed: {exc}") from exc
    return ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)


def print_order_ticket(order: Order, printer: Any = None, font: Any = None) -> None:
    """Print and cut the pickup ticket for ``order``; orders without lines print nothing."""
    if not order.items:
        return
    printer = printer if printer is not None else _open_printer()
    font = font if font is not None else _load_font()
    small = _note_font(font)
    rows = group_ticket_lines(order.items)
    text_room = PRINTER_WIDTH_PX - 2 * PRINTER_LEFT_INDENT_PX

    printer.image(_header(order, font))
    in_food = False
    for row in rows:
        if row.is_food and not in_food:
            _print_food_rule(printer)
            in_food = True
        printer.image(_text_row(_truncate(row.label, font, text_room), font, _ITEM_PADDING_PX))
        for note in row.notes():
            printer.image(_text_row(_NOTE_INDENT + note, small, _NOTE_PADDING_PX))

    if len(rows) == 1:
        # Short tickets get a tail so they can be torn off cleanly.
        printer.image(_blank(PRINTER_SINGLE_ITEM_SPACER_PX))
    printer.cut()
    logger.info("printed ticket order_id=%s rows=%d", order.order_id, len(rows))
