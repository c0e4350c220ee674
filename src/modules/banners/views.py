"""Banner API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.banners.dtos import CreateBannerDTO, UpdateBannerDTO
from modules.banners.models import Banner
from modules.banners.repositories.django_repository import BannerDjangoRepository
from modules.banners.serializers import BannerSerializer
from modules.banners.services import BannerService
from modules.core.actors import Actor


class BannerViewSet(GenericViewSet):
    """``GET /banners/`` is public; everything else is admin only."""

    queryset = Banner.objects.none()
    serializer_class = BannerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = BannerService(repository=BannerDjangoRepository())

    def get_permissions(self):
        if self.action == "list":
            return [AllowAny()]
        return [IsAuthenticated()]

    @staticmethod
    def _listing(banners) -> Response:
        data = BannerSerializer(banners, many=True).data
        return Response({"success": True, "count": len(data), "results": data})

    def list(self, request: Request) -> Response:
        """GET /api/v1/banners/"""
        return self._listing(self._service.list_active())

    @action(detail=False, methods=["get"], url_path="all")
    def all_banners(self, request: Request) -> Response:
        """GET /api/v1/banners/all/"""
        return self._listing(self._service.list_all(Actor.from_user(request.user)))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/banners/{pk}/"""
        banner = self._service.get_banner(str(pk), Actor.from_user(request.user))
        return Response(BannerSerializer(banner).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/banners/"""
        dto = CreateBannerDTO.model_validate(request.data)
        banner = self._service.create_banner(dto, Actor.from_user(request.user))
        return Response(BannerSerializer(banner).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/banners/{pk}/"""
        dto = UpdateBannerDTO.model_validate(request.data)
        banner = self._service.update_banner(str(pk), dto, Actor.from_user(request.user))
        return Response(BannerSerializer(banner).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        return self.update(request, pk)

    @action(detail=True, methods=["patch"])
    def toggle(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/banners/{pk}/toggle/"""
        banner = self._service.toggle_banner(str(pk), Actor.from_user(request.user))
        return Response(BannerSerializer(banner).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/banners/{pk}/"""
        self._service.delete_banner(str(pk), Actor.from_user(request.user))
        return Response(status=status.HTTP_204_NO_CONTENT)
