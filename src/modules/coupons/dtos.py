"""Coupon DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.coupons.models import DiscountType


class CreateCouponDTO(BaseModel):
    """Immutable DTO for coupon creation.

    Validates:
    - ``code`` is non-empty (normalized to upper case).
    - ``discount_value`` is non-negative; percentages are at most 100.
    - ``end_date`` is not before ``start_date``.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    description: str = ""
    discount_type: DiscountType
    discount_value: Decimal
    min_purchase: Decimal = Decimal("0")
    max_discount: Optional[Decimal] = None
    start_date: datetime
    end_date: datetime
    usage_limit: Optional[int] = None
    per_user_limit: int = 1
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if not v:
            raise ValueError("Coupon code must not be empty.")
        return v

    @field_validator("discount_value", "min_purchase", "max_discount")
    @classmethod
    def amount_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Amount cannot be negative.")
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> "CreateCouponDTO":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date.")
        if (
            self.discount_type == DiscountType.PERCENTAGE
            and self.discount_value > 100
        ):
            raise ValueError("Percentage discount cannot exceed 100.")
        return self


class ValidateCouponDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    amount: Decimal = Decimal("0")

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return (v or "").strip().upper()
