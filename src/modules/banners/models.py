"""Homepage banner model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel


class Banner(BaseModel):
    """Promotional banner shown on the storefront.

    A banner is currently active when ``is_active`` is set and ``now`` lies
    inside ``[start_date, end_date]``; a missing bound is open.
    ``position`` is the ascending sort key.
    """

    title = models.CharField(max_length=100, blank=True, default="")
    subtitle = models.CharField(max_length=100, blank=True, default="")
    description = models.CharField(max_length=200, blank=True, default="")
    button_text = models.CharField(max_length=50, default="Shop Now")
    button_link = models.CharField(max_length=500, default="/products")
    image = models.CharField(max_length=500)
    bg_color = models.CharField(max_length=32, blank=True, default="")
    is_active = models.BooleanField(default=True)
    position = models.IntegerField(default=0)
    start_date = models.DateTimeField(null=True, blank=True, default=timezone.now)
    end_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "banners"
        ordering = ["position", "-created_at"]
        indexes = [
            models.Index(fields=["position", "-created_at"], name="banners_position_idx"),
        ]

    def is_currently_active(self, now: Optional[datetime] = None) -> bool:
        now = now or timezone.now()
        started = self.start_date is None or self.start_date <= now
        not_ended = self.end_date is None or self.end_date >= now
        return self.is_active and started and not_ended

    def __str__(self) -> str:
        return self.title or str(self.id)
