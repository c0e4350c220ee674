"""Review service layer.

Business rules enforced:
- A user reviews a product at most once.
- Only users with a shipped or delivered order containing the product
  may review it; such reviews are marked ``verified``.
- Creating a review recomputes the product's rating summary from its
  approved reviews.
- Each user may mark a review helpful once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

import structlog
from django.db import transaction

from modules.core.exceptions import Forbidden
from modules.products.exceptions import ProductNotFound
from modules.reviews.exceptions import (
    AlreadyMarkedHelpful,
    AlreadyReviewed,
    ReviewNotAllowed,
    ReviewNotFound,
)
from modules.reviews.models import Review

if TYPE_CHECKING:
    from modules.core.actors import Actor
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository
    from modules.reviews.dtos import CreateReviewDTO
    from modules.reviews.repositories.interfaces import IReviewRepository

logger = structlog.get_logger(__name__)


class ReviewService:
    """Application service for Review use-cases."""

    def __init__(
        self,
        review_repository: IReviewRepository,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._repo = review_repository
        self._order_repo = order_repository
        self._product_repo = product_repository

    def list_for_product(self, product_id: str):
        """Approved reviews of ``product_id``, newest first (public)."""
        return self._repo.approved_for_product(product_id)

    def eligibility(self, product_id: str, actor: Actor) -> Tuple[bool, str]:
        """Return ``(can_review, message)`` for ``actor`` and ``product_id``."""
        self._require_user(actor)
        if not self._order_repo.has_purchased(actor.user_id, product_id):
            return False, ReviewNotAllowed.default_message
        if self._repo.exists_for(product_id, actor.user_id):
            return False, AlreadyReviewed.default_message
        return True, ""

    @transaction.atomic
    def create_review(self, dto: CreateReviewDTO, actor: Actor) -> Review:
        """Create a verified review and refresh the product's ratings.

        Raises:
            ProductNotFound: the product does not exist.
            AlreadyReviewed: the user already reviewed this product.
            ReviewNotAllowed: the user never received this product.
        """
        self._require_user(actor)
        product_id = str(dto.product)
        log = logger.bind(product_id=product_id, user_id=actor.user_id)

        if self._product_repo.get_by_id(product_id) is None:
            raise ProductNotFound(f"Product {product_id} not found.")
        if self._repo.exists_for(product_id, actor.user_id):
            log.info("review.duplicate_rejected")
            raise AlreadyReviewed()
        if not self._order_repo.has_purchased(actor.user_id, product_id):
            log.info("review.not_purchased")
            raise ReviewNotAllowed()

        review = self._repo.save(
            Review(
                product_id=dto.product,
                user_id=actor.user_id,
                rating=dto.rating,
                title=dto.title,
                comment=dto.comment,
                images=list(dto.images),
                verified=True,
            )
        )

        average, count = self._repo.rating_summary(product_id)
        self._product_repo.update_ratings(product_id, average, count)

        log.info("review.created", review_id=str(review.id), rating=review.rating)
        return review

    @transaction.atomic
    def mark_helpful(self, review_id: str, actor: Actor) -> Review:
        """Count ``actor``'s helpful vote on a review, once.

        Raises:
            ReviewNotFound: the review does not exist.
            AlreadyMarkedHelpful: the actor already voted.
        """
        self._require_user(actor)
        review = self._repo.get_by_id(review_id)
        if review is None:
            raise ReviewNotFound(f"Review {review_id} not found.")
        if self._repo.has_marked_helpful(review, actor.user_id):
            raise AlreadyMarkedHelpful()

        review = self._repo.mark_helpful(review, actor.user_id)
        logger.info(
            "review.marked_helpful",
            review_id=str(review.id),
            helpful_count=review.helpful_count,
        )
        return review

    @staticmethod
    def _require_user(actor: Actor) -> None:
        if actor.user_id is None:
            raise Forbidden("Authentication required.")
