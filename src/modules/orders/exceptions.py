"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
``InsufficientStock`` lives in ``modules.core.exceptions`` and is
re-exported here for convenience.
"""

from __future__ import annotations

from modules.core.exceptions import InsufficientStock, NotFound, ValidationFailed

__all__ = ["InsufficientStock", "InvalidOrderStatus", "OrderNotFound"]


class OrderNotFound(NotFound):
    """The requested order does not exist."""

    default_message = "Order not found."


class InvalidOrderStatus(ValidationFailed):
    """The requested status is not one of the known order states."""
