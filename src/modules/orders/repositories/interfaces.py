"""Order repository interface.

Extends ``IRepository[Order]`` with methods required by the Order
aggregate: creation with items, row locking for status transitions,
status history tracking, and the purchase look-up used by reviews.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Orders are never deleted.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items.

        ``data`` holds the order fields plus ``items``: a list of snapshot
        dicts (``product_id``, ``name``, ``image``, ``price``, ``currency``,
        ``quantity``, ``variant``) stored in the given order.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched items and status history."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[Order]:
        """List orders with optional filters, newest first."""

    @abstractmethod
    def add_history(
        self,
        order_id: Any,
        status: str,
        note: str = "",
        changed_by_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        """Append a status change to the order's audit trail."""

    @abstractmethod
    def has_purchased(self, user_id: int, product_id: Any) -> bool:
        """Whether ``user_id`` has a shipped/delivered order for ``product_id``."""
