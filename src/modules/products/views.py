"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``api_exception_handler``, which renders
them with the standard error envelope.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.actors import Actor
from modules.core.pagination import StandardResultsSetPagination
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductListSerializer, ProductSerializer
from modules.products.services import ProductService

PUBLIC_ACTIONS = {"list", "retrieve", "by_slug"}


class ProductViewSet(GenericViewSet):
    """ViewSet for the catalogue.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    queryset = Product.objects.none()
    serializer_class = ProductSerializer
    filterset_class = ProductFilter
    ordering_fields = ["created_at", "price", "name", "sales", "ratings_average"]
    ordering = ["-created_at"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return self._service.list_products()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = ProductListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(str(pk))
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[a-z0-9-]+)")
    def by_slug(self, request: Request, slug: str | None = None) -> Response:
        """GET /api/v1/products/slug/{slug}/"""
        product = self._service.get_product_by_slug(str(slug))
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        dto = CreateProductDTO.model_validate(request.data)
        product = self._service.create_product(dto, Actor.from_user(request.user))
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/

        Only the supplied fields change; ``"slug": null`` clears the slug.
        """
        dto = UpdateProductDTO.model_validate(request.data)
        product = self._service.update_product(
            str(pk), dto, Actor.from_user(request.user)
        )
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @action(detail=True, methods=["patch"], url_path="featured")
    def toggle_featured(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/featured/"""
        product = self._service.toggle_featured(str(pk), Actor.from_user(request.user))
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete_product(str(pk), Actor.from_user(request.user))
        return Response(status=status.HTTP_204_NO_CONTENT)
