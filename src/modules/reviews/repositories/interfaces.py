"""Review repository interface."""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.reviews.models import Review


class IReviewRepository(IRepository["Review"]):
    """Repository contract for product reviews."""

    @abstractmethod
    def exists_for(self, product_id: Any, user_id: int) -> bool:
        """Whether ``user_id`` already reviewed ``product_id``."""

    @abstractmethod
    def approved_for_product(self, product_id: Any):
        """Approved reviews of a product, newest first."""

    @abstractmethod
    def rating_summary(self, product_id: Any) -> Tuple[Decimal, int]:
        """``(average, count)`` over the approved reviews of a product."""

    @abstractmethod
    def has_marked_helpful(self, review: Review, user_id: int) -> bool:
        """Whether ``user_id`` already marked ``review`` helpful."""

    @abstractmethod
    def mark_helpful(self, review: Review, user_id: int) -> Review:
        """Record ``user_id`` as a helpful vote and bump the counter."""
