"""Unit tests for coupon validity and discount rules.

These work on unsaved ``Coupon`` instances; no database access is needed.
"""

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest

from modules.coupons.models import Coupon, DiscountType
from modules.coupons.validation import compute_discount, end_of_day, is_coupon_valid

pytestmark = pytest.mark.unit


def _at(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


def _coupon(**overrides):
    defaults = {
        "code": "SUMMER",
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("20"),
        "min_purchase": Decimal("0"),
        "start_date": _at(2026, 6, 1),
        "end_date": _at(2026, 6, 30, 9, 0),
        "used_count": 0,
        "is_active": True,
    }
    defaults.update(overrides)
    return Coupon(**defaults)


# ===========================================================================
# Validity
# ===========================================================================


class TestIsCouponValid:
    def test_inside_window(self):
        assert is_coupon_valid(_coupon(), _at(2026, 6, 15))

    def test_before_start(self):
        assert not is_coupon_valid(_coupon(), _at(2026, 5, 31, 23, 59))

    def test_end_date_inclusive_through_end_of_day(self):
        assert is_coupon_valid(_coupon(), _at(2026, 6, 30, 23, 59, 59))

    def test_day_after_end(self):
        assert not is_coupon_valid(_coupon(), _at(2026, 7, 1, 0, 0, 1))

    def test_inactive(self):
        assert not is_coupon_valid(_coupon(is_active=False), _at(2026, 6, 15))

    def test_usage_limit_reached(self):
        coupon = _coupon(usage_limit=3, used_count=3)
        assert not is_coupon_valid(coupon, _at(2026, 6, 15))

    def test_usage_limit_not_reached(self):
        coupon = _coupon(usage_limit=3, used_count=2)
        assert is_coupon_valid(coupon, _at(2026, 6, 15))

    def test_minimum_purchase(self):
        coupon = _coupon(min_purchase=Decimal("50.00"))
        now = _at(2026, 6, 15)

        assert not is_coupon_valid(coupon, now, Decimal("49.99"))
        assert is_coupon_valid(coupon, now, Decimal("50.00"))

    def test_no_amount_skips_minimum(self):
        coupon = _coupon(min_purchase=Decimal("50.00"))
        assert is_coupon_valid(coupon, _at(2026, 6, 15))

    def test_end_of_day(self):
        assert end_of_day(_at(2026, 6, 30, 9, 0)) == _at(2026, 6, 30, 23, 59, 59, 999999)


# ===========================================================================
# Discount amount
# ===========================================================================


class TestComputeDiscount:
    def test_percentage(self):
        assert compute_discount(_coupon(), Decimal("80.00")) == Decimal("16.00")

    def test_percentage_rounds_to_cents(self):
        coupon = _coupon(discount_value=Decimal("15"))
        assert compute_discount(coupon, Decimal("9.99")) == Decimal("1.50")

    def test_percentage_capped(self):
        coupon = _coupon(max_discount=Decimal("10.00"))
        assert compute_discount(coupon, Decimal("200.00")) == Decimal("10.00")

    def test_fixed(self):
        coupon = _coupon(discount_type=DiscountType.FIXED, discount_value=Decimal("5"))
        assert compute_discount(coupon, Decimal("30.00")) == Decimal("5.00")

    def test_never_exceeds_amount(self):
        coupon = _coupon(discount_type=DiscountType.FIXED, discount_value=Decimal("25"))
        assert compute_discount(coupon, Decimal("12.40")) == Decimal("12.40")
