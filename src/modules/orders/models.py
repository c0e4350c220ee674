"""Order, OrderItem, and OrderStatusHistory models.

Business rules implemented:
- Order number auto-generated on first save (``ORD-YYYYMMDD-<6><3>``).  Only
  the unique index guards against collisions; there is no retry.
- OrderItem is an immutable snapshot (name, image, price, currency, variant)
  of the product at creation time, not a live reference to catalogue data.
- Pricing is computed once at creation and never recomputed.
- ``cancelled_at`` is set iff the order is cancelled; ``delivered_at`` is
  stamped when the order enters ``delivered``.
- Status history is append-only: one row per transition, none for creation.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

import structlog
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    DEFAULT_CURRENCY,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)

logger = structlog.get_logger(__name__)

_MONEY = {"max_digits": 12, "decimal_places": 2}


class Order(BaseModel):
    """Order aggregate root.

    ``order_number`` is the human-readable identifier; the UUIDv7 ``id`` is
    used for API look-ups.  Addresses are stored as JSON snapshots.
    """

    order_number = models.CharField(max_length=32, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    shipping_address = models.JSONField(default=dict)
    billing_address = models.JSONField(default=dict, blank=True)

    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_transaction_id = models.CharField(max_length=255, blank=True, default="")
    paid_at = models.DateTimeField(null=True, blank=True)

    subtotal = models.DecimalField(**_MONEY)
    shipping = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    tax = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    discount = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    total = models.DecimalField(**_MONEY)

    coupon_code = models.CharField(max_length=50, blank=True, default="")
    coupon_discount = models.DecimalField(**_MONEY, null=True, blank=True)

    tracking_carrier = models.CharField(max_length=100, blank=True, default="")
    tracking_number = models.CharField(max_length=100, blank=True, default="")
    tracking_url = models.URLField(max_length=500, blank=True, default="")

    customer_note = models.TextField(blank=True, default="")
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)

    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
        ]

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        """``ORD-YYYYMMDD-`` + last 6 digits of epoch ms + 3 random digits."""
        now = timezone.localtime()
        millis = str(int(now.timestamp() * 1000))[-6:]
        rand = f"{secrets.randbelow(1000):03d}"
        return f"ORD-{now:%Y%m%d}-{millis}{rand}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            self.order_number = self.generate_order_number()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item snapshot.

    ``price`` is the product price at the time of purchase and never changes
    afterwards.  ``product`` is kept for reconciliation and review
    eligibility only.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    position = models.PositiveIntegerField(default=0)
    name = models.CharField(max_length=255)
    image = models.CharField(max_length=500, blank=True, default="")
    price = models.DecimalField(**_MONEY)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    variant = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail of status transitions.

    Audit rows are immutable: they are never edited or deleted.
    ``created_at`` is the transition timestamp.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    note = models.TextField(blank=True, default="")
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} -> {self.status}"
