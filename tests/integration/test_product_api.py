"""Integration tests for the catalogue endpoints (/api/v1/products/)."""

from decimal import Decimal

import pytest

pytestmark = pytest.mark.integration

PRODUCTS_URL = "/api/v1/products/"


@pytest.fixture()
def editor_client(client_for, editor_user):
    return client_for(editor_user)


class TestPublicCatalogue:
    def test_list_is_public(self, api_client, make_product):
        make_product(name="Visible")
        make_product(name="Hidden", is_active=False)

        response = api_client.get(PRODUCTS_URL)

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["results"]] == ["Visible"]

    def test_deleted_products_not_listed(self, api_client, make_product):
        make_product(name="Gone").delete()
        assert api_client.get(PRODUCTS_URL).json()["total"] == 0

    def test_filters(self, api_client, make_product):
        make_product(name="Cheap", price=Decimal("5.00"), category="Kitchen")
        make_product(name="Pricey", price=Decimal("500.00"), category="kitchen")
        make_product(name="Empty", stock=0, category="Garden")

        def names(params):
            return sorted(p["name"] for p in api_client.get(PRODUCTS_URL, params).json()["results"])

        assert names({"category": "KITCHEN"}) == ["Cheap", "Pricey"]
        assert names({"max_price": "10"}) == ["Cheap", "Empty"]
        assert names({"in_stock": "true"}) == ["Cheap", "Pricey"]
        assert names({"search": "pric"}) == ["Pricey"]

    def test_by_slug(self, api_client, make_product):
        product = make_product(name="Oak Chair", slug="oak-chair")

        response = api_client.get(f"{PRODUCTS_URL}slug/oak-chair/")

        assert response.status_code == 200
        assert response.json()["id"] == str(product.id)

    def test_unknown_slug_is_404(self, api_client):
        response = api_client.get(f"{PRODUCTS_URL}slug/nothing-here/")
        assert response.status_code == 404
        assert response.json()["type"] == "not_found"


class TestManageCatalogue:
    def test_editor_creates_with_generated_slug(self, editor_client):
        payload = {"name": "Linen Shirt", "description": "Breathable.", "price": "45.00", "stock": 3}

        first = editor_client.post(PRODUCTS_URL, payload, format="json")
        second = editor_client.post(PRODUCTS_URL, payload, format="json")

        assert first.status_code == 201
        assert first.json()["slug"] == "linen-shirt"
        assert second.json()["slug"] == "linen-shirt-2"

    def test_customer_forbidden(self, client_for, customer_user):
        payload = {"name": "Linen Shirt", "description": "Breathable.", "price": "45.00"}
        response = client_for(customer_user).post(PRODUCTS_URL, payload, format="json")
        assert response.status_code == 403

    def test_anonymous_unauthorised(self, api_client):
        response = api_client.post(PRODUCTS_URL, {"name": "x"}, format="json")
        assert response.status_code == 401

    def test_invalid_payload(self, editor_client):
        response = editor_client.post(
            PRODUCTS_URL, {"name": "", "description": "d", "price": "-1"}, format="json"
        )
        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"name", "price"} <= fields

    def test_patch_renames_slug(self, editor_client, make_product):
        product = make_product(name="Old Name", slug="old-name")

        response = editor_client.patch(
            f"{PRODUCTS_URL}{product.id}/", {"name": "New Name"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["slug"] == "new-name"

    def test_toggle_featured(self, editor_client, make_product):
        product = make_product(featured=False)
        response = editor_client.patch(f"{PRODUCTS_URL}{product.id}/featured/")
        assert response.json()["featured"] is True

    def test_only_admin_deletes(self, editor_client, client_for, admin_user, make_product):
        product = make_product()

        assert editor_client.delete(f"{PRODUCTS_URL}{product.id}/").status_code == 403
        assert client_for(admin_user).delete(f"{PRODUCTS_URL}{product.id}/").status_code == 204
        product.refresh_from_db()
        assert product.is_deleted
