from rest_framework import serializers

from modules.banners.models import Banner


class BannerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Banner
        fields = [
            "id",
            "title",
            "subtitle",
            "description",
            "button_text",
            "button_link",
            "image",
            "bg_color",
            "is_active",
            "position",
            "start_date",
            "end_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
