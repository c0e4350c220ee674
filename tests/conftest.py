from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from modules.core.actors import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_EDITOR, Actor
from modules.products.models import Product

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and actors
# ---------------------------------------------------------------------------


def _user_in_group(username: str, group: str | None = None):
    user = User.objects.create_user(username=username, password="testpass123")
    if group:
        user.groups.add(Group.objects.get_or_create(name=group)[0])
    return user


@pytest.fixture()
def customer_user():
    return _user_in_group("shopper")


@pytest.fixture()
def other_customer_user():
    return _user_in_group("other-shopper")


@pytest.fixture()
def admin_user():
    return _user_in_group("store-admin", ROLE_ADMIN)


@pytest.fixture()
def editor_user():
    return _user_in_group("store-editor", ROLE_EDITOR)


@pytest.fixture()
def customer_actor(customer_user):
    return Actor(user_id=customer_user.pk, role=ROLE_CUSTOMER)


@pytest.fixture()
def other_actor(other_customer_user):
    return Actor(user_id=other_customer_user.pk, role=ROLE_CUSTOMER)


@pytest.fixture()
def admin_actor(admin_user):
    return Actor(user_id=admin_user.pk, role=ROLE_ADMIN)


@pytest.fixture()
def editor_actor(editor_user):
    return Actor(user_id=editor_user.pk, role=ROLE_EDITOR)


@pytest.fixture()
def client_for():
    """Build an APIClient force-authenticated as ``user``."""

    def _build(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _build


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_product():
    counter = {"n": 0}

    def _make(**overrides) -> Product:
        counter["n"] += 1
        defaults = {
            "name": f"Product {counter['n']}",
            "slug": f"product-{counter['n']}",
            "description": "A product.",
            "price": Decimal("10.00"),
            "stock": 10,
            "images": [{"url": f"https://cdn.example.com/p{counter['n']}.jpg"}],
        }
        defaults.update(overrides)
        return Product.objects.create(**defaults)

    return _make
