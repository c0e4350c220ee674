"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``api_exception_handler``; the view never
swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.actors import Actor
from modules.core.exceptions import ValidationFailed
from modules.core.pagination import StandardResultsSetPagination
from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.orders.dtos import CreateOrderDTO, TrackingDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderListSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.none()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            coupon_repository=CouponDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttle scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_orders(Actor.from_user(self.request.user))

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        dto = CreateOrderDTO.model_validate(request.data)
        order = self._service.create_order(dto, Actor.from_user(request.user))
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Admins see every order; other users see their own.  Filtering is
        handled by ``OrderFilter``; results are newest first and paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(str(pk), Actor.from_user(request.user))
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status / Cancel / Tracking
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/status/"""
        status_value = request.data.get("status")
        if not status_value:
            raise ValidationFailed("Field 'status' is required.", field="status")

        order = self._service.update_status(
            order_id=str(pk),
            new_status=str(status_value),
            actor=Actor.from_user(request.user),
            note=request.data.get("note") or "",
        )
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/cancel/"""
        order = self._service.cancel_own_order(
            order_id=str(pk),
            actor=Actor.from_user(request.user),
            note=request.data.get("note") or "",
        )
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put"])
    def tracking(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/tracking/"""
        dto = TrackingDTO.model_validate(request.data)
        order = self._service.update_tracking(
            str(pk), dto, Actor.from_user(request.user)
        )
        return Response(OrderSerializer(order).data)
