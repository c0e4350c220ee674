from rest_framework import serializers

from modules.site_settings.models import SiteSettings


class SiteSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = SiteSettings
        fields = ["id", "data", "updated_by", "created_at", "updated_at"]
        read_only_fields = fields
