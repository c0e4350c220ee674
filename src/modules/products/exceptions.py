"""Product domain exceptions.

Raised by the Service Layer when business rules are violated and rendered
by ``modules.core.exceptions.api_exception_handler``.
"""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound


class ProductNotFound(NotFound):
    """The requested product does not exist or has been soft-deleted."""

    default_message = "Product not found."


class ProductAlreadyExists(Conflict):
    """A product with the same SKU already exists."""


class SlugConflict(Conflict):
    """A unique slug could not be stored after repeated reallocation."""
