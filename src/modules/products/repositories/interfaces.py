"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups required by slug
allocation, SKU uniqueness, and stock reconciliation.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Product]:
        """Retrieve a live product by slug."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used by the order service for stock/sales reconciliation.
        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        """Whether any product other than ``exclude_id`` holds ``slug``."""

    @abstractmethod
    def find_slug_family(
        self, base: str, exclude_id: Optional[str] = None
    ) -> List[str]:
        """Slugs equal to ``base`` or ``base-<n>``, excluding ``exclude_id``."""

    @abstractmethod
    def save_inventory(self, product: Product) -> Product:
        """Persist only the stock and sales counters of ``product``."""

    @abstractmethod
    def update_ratings(self, id: str, average: Decimal, count: int) -> None:
        """Overwrite the denormalized rating summary of a product."""

    @abstractmethod
    def search(self, filters: Optional[dict] = None) -> Iterable[Product]:
        """Active, non-deleted products for the public catalogue."""
