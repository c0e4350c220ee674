"""Product review model.

Business rules implemented:
- One review per (product, user); the service checks before inserting and
  a unique constraint backs it up.
- Only approved reviews are listed publicly and count towards ratings.
- ``helpful_users`` records who marked the review helpful (once each);
  ``helpful_count`` is its denormalized size.
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class Review(BaseModel):
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    title = models.CharField(max_length=200, blank=True, default="")
    comment = models.TextField()
    images = models.JSONField(default=list, blank=True)
    verified = models.BooleanField(default=False)
    is_approved = models.BooleanField(default=True)
    helpful_count = models.PositiveIntegerField(default=0)
    helpful_users = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="helpful_reviews",
        blank=True,
    )

    class Meta:
        db_table = "reviews"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "user"], name="reviews_one_per_product_user"
            ),
            models.CheckConstraint(
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                name="reviews_rating_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id} by {self.user_id}: {self.rating}"
