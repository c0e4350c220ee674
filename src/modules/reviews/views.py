"""Review API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.actors import Actor
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.reviews.dtos import CreateReviewDTO
from modules.reviews.models import Review
from modules.reviews.repositories.django_repository import ReviewDjangoRepository
from modules.reviews.serializers import ReviewSerializer
from modules.reviews.services import ReviewService

PRODUCT_ID_PATTERN = r"product/(?P<product_id>[0-9a-fA-F-]+)"


class ReviewViewSet(GenericViewSet):
    """Public review listing plus authenticated review actions."""

    queryset = Review.objects.none()
    serializer_class = ReviewSerializer
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ReviewService(
            review_repository=ReviewDjangoRepository(),
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_permissions(self):
        if self.action == "for_product":
            return [AllowAny()]
        return [IsAuthenticated()]

    @action(detail=False, methods=["get"], url_path=PRODUCT_ID_PATTERN)
    def for_product(self, request: Request, product_id: str | None = None) -> Response:
        """GET /api/v1/reviews/product/{product_id}/"""
        reviews = self._service.list_for_product(str(product_id))
        page = self.paginate_queryset(reviews)
        return self.get_paginated_response(ReviewSerializer(page, many=True).data)

    @action(
        detail=False,
        methods=["get"],
        url_path=PRODUCT_ID_PATTERN + "/eligibility",
    )
    def eligibility(self, request: Request, product_id: str | None = None) -> Response:
        """GET /api/v1/reviews/product/{product_id}/eligibility/"""
        can_review, message = self._service.eligibility(
            str(product_id), Actor.from_user(request.user)
        )
        return Response({"success": True, "can_review": can_review, "message": message})

    def create(self, request: Request) -> Response:
        """POST /api/v1/reviews/"""
        dto = CreateReviewDTO.model_validate(request.data)
        review = self._service.create_review(dto, Actor.from_user(request.user))
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["put"])
    def helpful(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/reviews/{pk}/helpful/"""
        review = self._service.mark_helpful(str(pk), Actor.from_user(request.user))
        return Response(ReviewSerializer(review).data)
