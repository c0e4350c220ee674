"""Django ORM implementation of the Banner repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from modules.banners.models import Banner
from modules.banners.repositories.interfaces import IBannerRepository

logger = structlog.get_logger(__name__)


class BannerDjangoRepository(IBannerRepository):
    """Concrete Banner repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Banner]:
        try:
            return Banner.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Banner.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("position", "-created_at")

    def currently_active(self, now: datetime) -> models.QuerySet:
        started = Q(start_date__isnull=True) | Q(start_date__lte=now)
        not_ended = Q(end_date__isnull=True) | Q(end_date__gte=now)
        return self.list().filter(Q(is_active=True) & started & not_ended)

    def save(self, entity: Banner) -> Banner:
        entity.save()
        logger.info("banner.saved", banner_id=str(entity.id))
        return entity

    def delete(self, id: str) -> bool:
        """Permanently remove a banner."""
        try:
            deleted, _ = Banner.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        return deleted > 0
