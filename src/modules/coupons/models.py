"""Coupon model.

Business rules implemented:
- ``code`` is unique and stored trimmed and upper-cased.
- ``usage_limit`` of ``None`` means unlimited redemptions.
- Validity is decided by ``modules.coupons.validation.is_coupon_valid``,
  a pure function of the coupon, the clock, and the purchase amount.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

_MONEY = {"max_digits": 12, "decimal_places": 2}


class DiscountType(models.TextChoices):
    PERCENTAGE = "percentage", "Percentage"
    FIXED = "fixed", "Fixed amount"


class Coupon(BaseModel):
    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True, default="")
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_value = models.DecimalField(
        **_MONEY, validators=[MinValueValidator(Decimal("0.00"))]
    )
    min_purchase = models.DecimalField(**_MONEY, default=Decimal("0.00"))
    max_discount = models.DecimalField(**_MONEY, null=True, blank=True)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    usage_limit = models.PositiveIntegerField(null=True, blank=True, default=None)
    used_count = models.PositiveIntegerField(default=0)
    per_user_limit = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "coupons"
        ordering = ["-created_at"]

    def save(self, *args, **kwargs) -> None:
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.code
