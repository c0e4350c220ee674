"""Product model with slug uniqueness, inventory, and sales counters.

Business rules implemented:
- Slug, when present, is unique across all products (partial unique
  constraint ignoring NULL/empty slugs).  Allocation lives in ``slugs.py``.
- ``stock`` is only consulted/mutated when ``track_inventory`` is true.
- ``sales`` moves in lockstep with stock but regardless of tracking, and is
  floored at zero when an order is reverted.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).  Deleted
  products keep their slug, so it is never handed out again.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class Currency(models.TextChoices):
    USD = "USD", "US Dollar"
    EUR = "EUR", "Euro"
    GBP = "GBP", "Pound Sterling"
    BDT = "BDT", "Taka"
    INR = "INR", "Indian Rupee"
    JPY = "JPY", "Yen"
    CNY = "CNY", "Yuan"
    AUD = "AUD", "Australian Dollar"
    CAD = "CAD", "Canadian Dollar"


class Product(SoftDeleteModel):
    """Catalogue product.

    ``images`` is a list of ``{"url", "alt", "color"}`` objects and
    ``variants`` a list of ``{"name", "options"}`` objects, both stored as
    JSON.  ``sku`` is optional but unique when set.
    """

    name = models.CharField(max_length=255)
    slug = models.CharField(max_length=255, null=True, blank=True, default=None)
    description = models.TextField()
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    compare_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )
    currency = models.CharField(
        max_length=3,
        choices=Currency.choices,
        default=Currency.USD,
    )
    category = models.CharField(max_length=100, blank=True, default="")
    subcategory = models.CharField(max_length=100, blank=True, default="")
    tags = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)
    variants = models.JSONField(default=list, blank=True)

    # Inventory
    sku = models.CharField(max_length=64, unique=True, null=True, blank=True)
    stock = models.PositiveIntegerField(default=0)
    low_stock_threshold = models.PositiveIntegerField(default=10)
    track_inventory = models.BooleanField(default=True)

    ratings_average = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    ratings_count = models.PositiveIntegerField(default=0)
    sales = models.PositiveIntegerField(default=0)
    featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products_created",
    )

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "-created_at"], name="products_active_idx"),
            models.Index(fields=["category"], name="products_category_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["slug"],
                condition=models.Q(slug__isnull=False) & ~models.Q(slug=""),
                name="products_unique_slug_nonempty",
            ),
        ]

    # ------------------------------------------------------------------
    # Inventory helpers
    # ------------------------------------------------------------------

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    @property
    def primary_image(self) -> str:
        if self.images:
            first = self.images[0]
            if isinstance(first, dict):
                return first.get("url", "") or ""
        return ""

    def has_stock_for(self, quantity: int) -> bool:
        """Untracked products always have stock."""
        return not self.track_inventory or self.stock >= quantity

    def consume(self, quantity: int) -> None:
        """Record ``quantity`` units as sold (order placed or reinstated)."""
        self.sales = (self.sales or 0) + quantity
        if self.track_inventory:
            self.stock = (self.stock or 0) - quantity

    def restock(self, quantity: int) -> None:
        """Revert ``quantity`` sold units (order cancelled)."""
        self.sales = max(0, (self.sales or 0) - quantity)
        if self.track_inventory:
            self.stock = (self.stock or 0) + quantity

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.sku is not None:
            self.sku = self.sku.strip().upper() or None
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                slug=self.slug,
                name=self.name,
            )

    def __str__(self) -> str:
        return self.name
