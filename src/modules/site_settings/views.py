"""Site settings API views."""

from __future__ import annotations

from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.actors import Actor
from modules.site_settings.repositories.django_repository import (
    SiteSettingsDjangoRepository,
)
from modules.site_settings.serializers import SiteSettingsSerializer
from modules.site_settings.services import SiteSettingsService


def _service() -> SiteSettingsService:
    return SiteSettingsService(repository=SiteSettingsDjangoRepository())


class PublicSettingsView(APIView):
    """GET /api/v1/settings/public/"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        return Response({"success": True, "settings": _service().get_public()})


class SettingsView(APIView):
    """GET/PUT /api/v1/settings/ (admin)."""

    def get(self, request: Request) -> Response:
        settings = _service().get_settings(Actor.from_user(request.user))
        return Response({"success": True, "settings": SiteSettingsSerializer(settings).data})

    def put(self, request: Request) -> Response:
        settings = _service().update_settings(
            request.data, Actor.from_user(request.user)
        )
        return Response(
            {
                "success": True,
                "message": "Settings updated",
                "settings": SiteSettingsSerializer(settings).data,
            }
        )
