"""Order persistence on the Django ORM.

``OrderService`` owns the transaction; this class only issues the writes.
Status changes read the order through ``get_for_update`` so concurrent
staff updates serialise on the row lock.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models

from modules.orders.constants import PURCHASED_STATES
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Orders, their item snapshots and their status history."""

    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order and its item snapshots.

        ``items`` keep the request order through ``position``.
        """
        fields = dict(data)
        items = fields.pop("items", [])

        order = Order.objects.create(**fields)

        OrderItem.objects.bulk_create(
            [
                OrderItem(order=order, position=position, **item)
                for position, item in enumerate(items)
            ]
        )

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(items),
        )
        return order

    def _base_queryset(self) -> models.QuerySet:
        return Order.objects.select_related("user").prefetch_related(
            "items", "status_history"
        )

    def get_by_id(self, id: str) -> Optional[Order]:
        """Order with user, items and history loaded, or ``None``."""
        try:
            return self._base_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Lock the order row and preload its items, or ``None`` if absent."""
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """Newest first; ``filters`` are plain ORM look-ups."""
        queryset = Order.objects.select_related("user").prefetch_related("items")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("-created_at", "-id")

    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info("order.saved", order_id=str(entity.id), status=entity.status)
        return entity

    def delete(self, id: str) -> bool:
        """Orders are never deleted; always returns ``False``."""
        logger.warning("order.delete_refused", order_id=str(id))
        return False

    def add_history(
        self,
        order_id: Any,
        status: str,
        note: str = "",
        changed_by_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        entry = OrderStatusHistory.objects.create(
            order_id=order_id,
            status=status,
            note=note,
            changed_by_id=changed_by_id,
        )
        logger.info("order.history_added", order_id=str(order_id), status=status)
        return entry

    def has_purchased(self, user_id: int, product_id: Any) -> bool:
        return OrderItem.objects.filter(
            order__user_id=user_id,
            order__status__in=PURCHASED_STATES,
            product_id=product_id,
        ).exists()
