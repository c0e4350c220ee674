"""Product DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "compare_price",
            "currency",
            "category",
            "subcategory",
            "tags",
            "images",
            "variants",
            "sku",
            "stock",
            "low_stock_threshold",
            "track_inventory",
            "is_low_stock",
            "ratings_average",
            "ratings_count",
            "sales",
            "featured",
            "is_active",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for catalogue listings."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "price",
            "compare_price",
            "currency",
            "category",
            "images",
            "stock",
            "ratings_average",
            "ratings_count",
            "featured",
            "created_at",
        ]
        read_only_fields = fields
