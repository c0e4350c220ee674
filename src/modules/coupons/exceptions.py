"""Coupon domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import Conflict, NotFound, ValidationFailed


class CouponNotFound(NotFound):
    default_message = "Coupon not found."


class CouponAlreadyExists(Conflict):
    default_message = "Coupon code already exists."


class InvalidCoupon(ValidationFailed):
    """Unknown, expired, exhausted, or below-minimum coupon."""

    default_message = "Invalid or expired coupon."
