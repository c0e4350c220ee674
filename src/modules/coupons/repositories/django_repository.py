"""Django ORM implementation of the Coupon repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F

from modules.coupons.models import Coupon
from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)


class CouponDjangoRepository(ICouponRepository):
    """Concrete Coupon repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Coupon]:
        try:
            return Coupon.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_code(self, code: str) -> Optional[Coupon]:
        return Coupon.objects.filter(code=code.strip().upper()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Coupon.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: Coupon) -> Coupon:
        entity.save()
        logger.info("coupon.saved", coupon_id=str(entity.id), code=entity.code)
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = Coupon.objects.filter(id=id).delete()
        return deleted > 0

    def increment_usage(self, coupon: Coupon) -> None:
        """``UPDATE ... SET used_count = used_count + 1``; no lost updates."""
        Coupon.objects.filter(pk=coupon.pk).update(used_count=F("used_count") + 1)
        coupon.refresh_from_db(fields=["used_count"])
        logger.info(
            "coupon.usage_incremented",
            coupon_id=str(coupon.id),
            used_count=coupon.used_count,
        )
