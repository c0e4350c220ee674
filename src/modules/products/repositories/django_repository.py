"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Methods return ``None`` instead of raising for missing rows; the Service
Layer decides how to translate a missing entity into a domain error.

Slug look-ups use the unfiltered manager: soft-deleted rows
still occupy their slug in the unique index.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a live product by primary key.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            return Product.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_slug(self, slug: str) -> Optional[Product]:
        return Product.objects.alive().filter(slug=slug).first()

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return Product.objects.filter(sku=sku.strip().upper()).first()

    def get_for_update(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_active": True}
            {"name__icontains": "shirt"}
        """
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def search(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        return self.list({"is_active": True, **(filters or {})})

    # ------------------------------------------------------------------
    # Slug support
    # ------------------------------------------------------------------

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        queryset = Product.objects.filter(slug=slug)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def find_slug_family(
        self, base: str, exclude_id: Optional[str] = None
    ) -> List[str]:
        queryset = Product.objects.filter(slug__regex=rf"^{re.escape(base)}(-[0-9]+)?$")
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return list(queryset.values_list("slug", flat=True))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            slug=entity.slug,
        )
        return entity

    def save_inventory(self, product: Product) -> Product:
        product.save(update_fields=["stock", "sales"])
        logger.info(
            "product.inventory_saved",
            product_id=str(product.id),
            stock=product.stock,
            sales=product.sales,
        )
        return product

    def update_ratings(self, id: str, average: Decimal, count: int) -> None:
        Product.objects.filter(id=id).update(
            ratings_average=average, ratings_count=count
        )
        logger.info(
            "product.ratings_updated",
            product_id=str(id),
            average=str(average),
            count=count,
        )

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if the product was found and soft-deleted,
        ``False`` if no live product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True
