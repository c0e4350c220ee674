"""Pure coupon rules: validity window, usage, and discount amount."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from django.utils import timezone

from modules.coupons.models import DiscountType

if TYPE_CHECKING:
    from modules.coupons.models import Coupon

CENT = Decimal("0.01")


def end_of_day(moment: datetime) -> datetime:
    """Last microsecond of ``moment``'s calendar day in local time."""
    local = timezone.localtime(moment) if timezone.is_aware(moment) else moment
    return local.replace(hour=23, minute=59, second=59, microsecond=999999)


def is_coupon_valid(
    coupon: Coupon,
    now: datetime,
    purchase_amount: Decimal | None = None,
) -> bool:
    """Whether ``coupon`` can be redeemed at ``now`` for ``purchase_amount``.

    The end date is inclusive for the whole day.  ``purchase_amount`` of
    ``None`` skips the minimum-purchase check.
    """
    if not coupon.is_active:
        return False
    if coupon.start_date is None or coupon.end_date is None:
        return False
    if now < coupon.start_date or now > end_of_day(coupon.end_date):
        return False
    if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
        return False
    if purchase_amount is not None and purchase_amount < (coupon.min_purchase or 0):
        return False
    return True


def compute_discount(coupon: Coupon, amount: Decimal) -> Decimal:
    """Discount granted by ``coupon`` on ``amount``, never more than ``amount``."""
    if coupon.discount_type == DiscountType.PERCENTAGE:
        discount = amount * coupon.discount_value / Decimal("100")
        if coupon.max_discount is not None:
            discount = min(discount, coupon.max_discount)
    else:
        discount = coupon.discount_value
    discount = min(discount, amount)
    return discount.quantize(CENT, rounding=ROUND_HALF_UP)
