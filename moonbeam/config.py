"""Runtime configuration defaults for checkout, persistence and printing."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("MOONBEAM_DB_PATH", "data/moonbeam.db")

TAX_RATE = "0.0875"

# Stars earned per dollar of order total (tip included).
LOYALTY_STARS_PER_DOLLAR = 2
STARS_PER_REWARD = 50

PAYMENT_DELAY_SECONDS = float(os.environ.get("MOONBEAM_PAYMENT_DELAY_SECONDS", "1.5"))
PAYMENT_TIMEOUT_SECONDS = float(os.environ.get("MOONBEAM_PAYMENT_TIMEOUT_SECONDS", "30"))

# Preparation simulation: move to "preparing" after a short pause and to
# "ready" once this share of the location wait has elapsed.
PREPARING_DELAY_SECONDS = 3.0
READY_WAIT_FRACTION = 0.8
DEFAULT_WAIT_MINUTES = 10

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 40
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_SINGLE_ITEM_SPACER_PX = 70
