"""Django ORM implementation of the Review repository."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Avg, Count, F

from modules.reviews.models import Review
from modules.reviews.repositories.interfaces import IReviewRepository

logger = structlog.get_logger(__name__)


class ReviewDjangoRepository(IReviewRepository):
    """Concrete Review repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Review]:
        try:
            return Review.objects.select_related("user").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Review.objects.select_related("user")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def approved_for_product(self, product_id: Any) -> models.QuerySet:
        return self.list({"product_id": product_id, "is_approved": True}).order_by(
            "-created_at", "-id"
        )

    def exists_for(self, product_id: Any, user_id: int) -> bool:
        return Review.objects.filter(product_id=product_id, user_id=user_id).exists()

    def rating_summary(self, product_id: Any) -> Tuple[Decimal, int]:
        summary = Review.objects.filter(
            product_id=product_id, is_approved=True
        ).aggregate(average=Avg("rating"), count=Count("id"))
        average = Decimal(str(summary["average"] or 0)).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        return average, summary["count"]

    def save(self, entity: Review) -> Review:
        entity.save()
        logger.info("review.saved", review_id=str(entity.id))
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = Review.objects.filter(id=id).delete()
        return deleted > 0

    def has_marked_helpful(self, review: Review, user_id: int) -> bool:
        return review.helpful_users.filter(pk=user_id).exists()

    def mark_helpful(self, review: Review, user_id: int) -> Review:
        review.helpful_users.add(user_id)
        Review.objects.filter(pk=review.pk).update(helpful_count=F("helpful_count") + 1)
        review.refresh_from_db(fields=["helpful_count"])
        return review
