"""Custom exceptions for the cafe ordering core."""

from __future__ import annotations


class MoonbeamError(Exception):
    """Base exception for all ordering errors."""

    pass


class InvalidOption(MoonbeamError):
    """Raised when a customization key or value is not in the catalog tables.

    This signals a catalog/customization mismatch and should not be swallowed.
    """

    def __init__(self, kind: str, value: object, reason: str | None = None):
        self.kind = kind
        self.value = value
        msg = f"Invalid {kind}: {value!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class UnsupportedOption(MoonbeamError):
    """Raised when a menu item is not offered with the requested size/temperature."""

    def __init__(self, item_id: str, kind: str, value: str, allowed: list[str]):
        self.item_id = item_id
        self.kind = kind
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"{item_id} is not available in {kind} '{value}'. Choose one of: {', '.join(allowed)}"
        )


class EmptyCartCheckout(MoonbeamError):
    """Raised when checkout is attempted with no line items."""

    def __init__(self):
        super().__init__("Your cart is empty. Add an item before checking out.")


class MissingLocation(MoonbeamError):
    """Raised when checkout is attempted without a pickup location."""

    def __init__(self):
        super().__init__("Choose a pickup location before checking out.")


class LocationClosed(MoonbeamError):
    """Raised when checkout targets a location that is not taking orders."""

    def __init__(self, location_id: str):
        self.location_id = location_id
        super().__init__(f"Location {location_id} is not taking orders right now.")


class CheckoutInProgress(MoonbeamError):
    """Raised when a second checkout starts while one is still in flight."""

    def __init__(self):
        super().__init__("A checkout is already in progress for this cart.")


class PaymentFailure(MoonbeamError):
    """Raised when payment is rejected. The cart is left untouched."""

    def __init__(self, method_id: str, reason: str):
        self.method_id = method_id
        self.reason = reason
        super().__init__(f"Payment with {method_id} failed: {reason}")


class PaymentTimeout(PaymentFailure):
    """Raised when the payment processor does not answer in time."""

    def __init__(self, method_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(method_id, f"no response after {timeout:g}s")


class OrderNotFound(MoonbeamError):
    """Raised when an order ID doesn't exist."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class InvalidStatusTransition(MoonbeamError):
    """Raised when an order status change would move backwards or leave a terminal state."""

    def __init__(self, order_id: str, current: str, requested: str):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        super().__init__(f"Order {order_id} cannot move from '{current}' to '{requested}'")


class UserNotFound(MoonbeamError):
    """Raised when a user ID doesn't exist."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class PermissionDenied(MoonbeamError):
    """Raised when a user attempts an action their role does not allow."""

    def __init__(self, action: str, reason: str | None = None):
        self.action = action
        msg = f"Not allowed to {action}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
