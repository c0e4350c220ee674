"""Coupon DRF serializers (output only; input goes through DTOs)."""

from __future__ import annotations

from rest_framework import serializers

from modules.coupons.models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Coupon
        fields = [
            "id",
            "code",
            "description",
            "discount_type",
            "discount_value",
            "min_purchase",
            "max_discount",
            "start_date",
            "end_date",
            "usage_limit",
            "used_count",
            "per_user_limit",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
