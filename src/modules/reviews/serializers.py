"""Review DRF serializers (output)."""

from __future__ import annotations

from rest_framework import serializers

from modules.reviews.models import Review


class ReviewSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            "id",
            "product_id",
            "user_id",
            "user_name",
            "rating",
            "title",
            "comment",
            "images",
            "verified",
            "is_approved",
            "helpful_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_user_name(self, obj: Review) -> str:
        user = obj.user
        return user.get_full_name() or user.get_username()
