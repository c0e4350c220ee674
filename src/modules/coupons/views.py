"""Coupon API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.actors import Actor
from modules.core.pagination import StandardResultsSetPagination
from modules.coupons.dtos import CreateCouponDTO, ValidateCouponDTO
from modules.coupons.models import Coupon
from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.coupons.serializers import CouponSerializer
from modules.coupons.services import CouponService, coupon_payload


class CouponViewSet(GenericViewSet):
    """Admin coupon management plus ``validate`` for shoppers."""

    queryset = Coupon.objects.none()
    serializer_class = CouponSerializer
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CouponService(repository=CouponDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/coupons/"""
        coupons = self._service.list_coupons(Actor.from_user(request.user))
        page = self.paginate_queryset(coupons)
        return self.get_paginated_response(CouponSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/coupons/{pk}/"""
        coupon = self._service.get_coupon(str(pk), Actor.from_user(request.user))
        return Response(CouponSerializer(coupon).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/coupons/"""
        dto = CreateCouponDTO.model_validate(request.data)
        coupon = self._service.create_coupon(dto, Actor.from_user(request.user))
        return Response(CouponSerializer(coupon).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def validate(self, request: Request) -> Response:
        """POST /api/v1/coupons/validate/"""
        dto = ValidateCouponDTO.model_validate(request.data)
        coupon, discount = self._service.validate(dto.code, dto.amount)
        return Response(
            {"success": True, "valid": True, "coupon": coupon_payload(coupon, discount)}
        )
