"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Only admins/editors manage the catalogue; only admins delete.
- SKU must be unique.
- Slug is allocated on creation and whenever ``name``/``slug`` is part of
  an update; an explicit empty/null slug clears it.
- A unique-index violation on the slug triggers a bounded reallocation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.core.exceptions import Forbidden
from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductNotFound,
    SlugConflict,
)
from modules.products.models import Product
from modules.products.slugs import SLUG_MAX_RETRIES, SlugAllocator

if TYPE_CHECKING:
    from modules.core.actors import Actor
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

# Fields that may be explicitly cleared by an update.
NULLABLE_FIELDS = frozenset({"compare_price", "sku"})


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    The slug allocator shares the same repository unless one is given.
    """

    def __init__(
        self,
        repository: IProductRepository,
        slug_allocator: Optional[SlugAllocator] = None,
    ) -> None:
        self._repo = repository
        self._slugs = slug_allocator or SlugAllocator(repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO, actor: Actor) -> Product:
        """Create a product and allocate its slug.

        Raises:
            Forbidden: actor is not an admin or editor.
            ProductAlreadyExists: SKU is already taken.
            SlugConflict: slug could not be stored after retries.
        """
        self._require_staff(actor)
        log = logger.bind(name=dto.name, user_id=actor.user_id)

        if dto.sku and self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku", sku=dto.sku)
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        data = dto.model_dump(exclude={"slug"})
        product = Product(**data, created_by_id=actor.user_id)

        base = (dto.slug or "").strip() or dto.name
        product = self._save_with_slug(product, base)
        log.info("product.created", product_id=str(product.id), slug=product.slug)
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO, actor: Actor) -> Product:
        """Apply the supplied fields of ``dto`` to an existing product.

        Raises:
            Forbidden: actor is not an admin or editor.
            ProductNotFound: the product does not exist.
            ProductAlreadyExists: the new SKU belongs to another product.
        """
        self._require_staff(actor)
        product = self._get_or_raise(id)
        log = logger.bind(product_id=str(id), fields=sorted(dto.model_fields_set))

        for field, value in dto.changes().items():
            if value is None and field not in NULLABLE_FIELDS:
                continue
            setattr(product, field, value)

        if "sku" in dto.model_fields_set and product.sku:
            existing = self._repo.get_by_sku(product.sku)
            if existing and existing.pk != product.pk:
                raise ProductAlreadyExists(f"SKU '{product.sku}' already registered.")

        fields = dto.model_fields_set
        if "slug" in fields and not (dto.slug or "").strip():
            product.slug = None
            product = self._repo.save(product)
            log.info("product.slug_cleared")
        elif "slug" in fields or ("name" in fields and dto.name):
            base = (dto.slug or "").strip() or dto.name
            product = self._save_with_slug(product, base)
        else:
            product = self._repo.save(product)

        log.info("product.updated", slug=product.slug)
        return product

    @transaction.atomic
    def toggle_featured(self, id: str, actor: Actor) -> Product:
        self._require_staff(actor)
        product = self._get_or_raise(id)
        product.featured = not product.featured
        product = self._repo.save(product)
        logger.info("product.featured_toggled", product_id=str(id), featured=product.featured)
        return product

    @transaction.atomic
    def delete_product(self, id: str, actor: Actor) -> None:
        """Soft-delete a product (admin only).

        Raises:
            Forbidden: actor is not an admin.
            ProductNotFound: if the product does not exist.
        """
        if not actor.is_admin:
            raise Forbidden("Only administrators can delete products.")
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(id), user_id=actor.user_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None):
        """Active products for the public catalogue."""
        return self._repo.search(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        return self._get_or_raise(id)

    def get_product_by_slug(self, slug: str) -> Product:
        product = self._repo.get_by_slug(slug)
        if not product:
            raise ProductNotFound(f"Product '{slug}' not found.")
        return product

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_or_raise(self, id: str) -> Product:
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    @staticmethod
    def _require_staff(actor: Actor) -> None:
        if not actor.is_staff_member:
            raise Forbidden("Only administrators and editors can manage products.")

    def _save_with_slug(self, product: Product, base: str) -> Product:
        """Allocate a slug and save; reallocate if the unique index rejects it.

        Each attempt runs in its own savepoint so a rejected INSERT/UPDATE
        does not poison the surrounding transaction.
        """
        entity_id = str(product.pk)
        for attempt in range(1, SLUG_MAX_RETRIES + 1):
            product.slug = self._slugs.allocate(base, entity_id=entity_id)
            try:
                with transaction.atomic():
                    return self._repo.save(product)
            except IntegrityError:
                if not self._repo.slug_exists(product.slug, exclude_id=entity_id):
                    raise
                logger.warning(
                    "product.slug_collision",
                    product_id=entity_id,
                    slug=product.slug,
                    attempt=attempt,
                )
        raise SlugConflict(
            f"Could not allocate a unique slug for '{base}' "
            f"after {SLUG_MAX_RETRIES} attempts.",
            slug=product.slug,
        )
