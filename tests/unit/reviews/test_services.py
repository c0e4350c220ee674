"""Unit tests for ReviewService: eligibility, creation, ratings and votes."""

from decimal import Decimal

import pytest

from modules.core.actors import Actor
from modules.core.exceptions import Forbidden
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.reviews.dtos import CreateReviewDTO
from modules.reviews.exceptions import (
    AlreadyMarkedHelpful,
    AlreadyReviewed,
    ReviewNotAllowed,
    ReviewNotFound,
)
from modules.reviews.repositories.django_repository import ReviewDjangoRepository
from modules.reviews.services import ReviewService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ReviewService(
        review_repository=ReviewDjangoRepository(),
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def product(make_product):
    return make_product(name="Walnut Desk", price=Decimal("250.00"))


@pytest.fixture()
def purchase():
    """Record an order of ``product`` for ``user_id`` in ``status``."""

    def _purchase(user_id, product, status=OrderStatus.DELIVERED):
        order = Order.objects.create(
            user_id=user_id,
            status=status,
            payment_method="card",
            subtotal=product.price,
            total=product.price,
        )
        OrderItem.objects.create(
            order=order, product=product, name=product.name, price=product.price, quantity=1
        )
        return order

    return _purchase


def _dto(product, rating=5, **overrides):
    data = {"product": str(product.id), "rating": rating, "comment": "Solid and well made."}
    data.update(overrides)
    return CreateReviewDTO.model_validate(data)


# ===========================================================================
# Eligibility
# ===========================================================================


class TestEligibility:
    def test_delivered_order_allows_review(self, service, product, purchase, customer_actor):
        purchase(customer_actor.user_id, product)
        assert service.eligibility(product.id, customer_actor) == (True, "")

    def test_shipped_order_allows_review(self, service, product, purchase, customer_actor):
        purchase(customer_actor.user_id, product, OrderStatus.SHIPPED)
        can_review, _ = service.eligibility(product.id, customer_actor)
        assert can_review

    def test_pending_order_does_not_count(self, service, product, purchase, customer_actor):
        purchase(customer_actor.user_id, product, OrderStatus.PENDING)
        assert service.eligibility(product.id, customer_actor) == (
            False,
            ReviewNotAllowed.default_message,
        )

    def test_already_reviewed(self, service, product, purchase, customer_actor):
        purchase(customer_actor.user_id, product)
        service.create_review(_dto(product), customer_actor)

        assert service.eligibility(product.id, customer_actor) == (
            False,
            AlreadyReviewed.default_message,
        )

    def test_anonymous(self, service, product):
        with pytest.raises(Forbidden):
            service.eligibility(product.id, Actor(user_id=None))


# ===========================================================================
# Creation and ratings
# ===========================================================================


class TestCreateReview:
    def test_creates_verified_review(self, service, product, purchase, customer_actor):
        purchase(customer_actor.user_id, product)

        review = service.create_review(_dto(product, rating=4, title="Nice"), customer_actor)

        assert review.verified is True
        assert review.is_approved is True
        assert (review.rating, review.title) == (4, "Nice")

    def test_not_purchased(self, service, product, customer_actor):
        with pytest.raises(ReviewNotAllowed):
            service.create_review(_dto(product), customer_actor)

    def test_second_review_rejected(self, service, product, purchase, customer_actor):
        purchase(customer_actor.user_id, product)
        service.create_review(_dto(product), customer_actor)

        with pytest.raises(AlreadyReviewed):
            service.create_review(_dto(product, rating=1), customer_actor)

    def test_unknown_product(self, service, product, customer_actor):
        product.delete()
        with pytest.raises(ProductNotFound):
            service.create_review(_dto(product), customer_actor)

    def test_ratings_recomputed(
        self, service, product, purchase, customer_actor, other_actor
    ):
        purchase(customer_actor.user_id, product)
        purchase(other_actor.user_id, product)

        service.create_review(_dto(product, rating=5), customer_actor)
        service.create_review(_dto(product, rating=2), other_actor)

        product.refresh_from_db()
        assert product.ratings_average == Decimal("3.50")
        assert product.ratings_count == 2

    def test_unapproved_reviews_excluded_from_listing(
        self, service, product, purchase, customer_actor, other_actor
    ):
        purchase(customer_actor.user_id, product)
        purchase(other_actor.user_id, product)
        hidden = service.create_review(_dto(product), customer_actor)
        shown = service.create_review(_dto(product), other_actor)
        hidden.is_approved = False
        hidden.save()

        assert [r.pk for r in service.list_for_product(product.id)] == [shown.pk]


class TestCreateReviewDTO:
    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, product, rating):
        with pytest.raises(ValueError):
            _dto(product, rating=rating)

    def test_blank_comment(self, product):
        with pytest.raises(ValueError):
            _dto(product, comment="   ")


# ===========================================================================
# Helpful votes
# ===========================================================================


class TestMarkHelpful:
    @pytest.fixture()
    def review(self, service, product, purchase, customer_actor):
        purchase(customer_actor.user_id, product)
        return service.create_review(_dto(product), customer_actor)

    def test_counts_once_per_user(self, service, review, other_actor, admin_actor):
        service.mark_helpful(review.id, other_actor)
        updated = service.mark_helpful(review.id, admin_actor)

        assert updated.helpful_count == 2

    def test_second_vote_rejected(self, service, review, other_actor):
        service.mark_helpful(review.id, other_actor)

        with pytest.raises(AlreadyMarkedHelpful):
            service.mark_helpful(review.id, other_actor)

        review.refresh_from_db()
        assert review.helpful_count == 1

    def test_missing_review(self, service, customer_actor):
        with pytest.raises(ReviewNotFound):
            service.mark_helpful("0190a0a0-0000-7000-8000-000000000000", customer_actor)
