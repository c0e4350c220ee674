"""Unit tests for order input DTOs."""

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, PricingOverridesDTO

pytestmark = pytest.mark.unit


def _payload(**overrides):
    data = {
        "items": [{"product_id": str(uuid4()), "quantity": 1}],
        "shipping_address": {"name": "Ada Lovelace"},
        "payment": {"method": "cod"},
    }
    data.update(overrides)
    return data


class TestCreateOrderDTO:
    def test_minimal_payload(self):
        dto = CreateOrderDTO.model_validate(_payload())

        assert dto.billing_address is None
        assert dto.pricing.shipping == Decimal("0")
        assert dto.coupon_code == ""

    def test_items_required(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(_payload(items=[]))

    def test_quantity_must_be_positive(self):
        items = [{"product_id": str(uuid4()), "quantity": 0}]
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(_payload(items=items))

    def test_bad_product_id(self):
        items = [{"product_id": "not-a-uuid", "quantity": 1}]
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(_payload(items=items))

    def test_unknown_payment_method(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(_payload(payment={"method": "barter"}))

    def test_shipping_address_needs_name(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO.model_validate(_payload(shipping_address={"city": "Paris"}))

    def test_coupon_code_normalised(self):
        dto = CreateOrderDTO.model_validate(_payload(coupon={"code": " spring24 "}))
        assert dto.coupon_code == "SPRING24"


class TestPricingOverrides:
    def test_none_is_zero(self):
        pricing = PricingOverridesDTO.model_validate({"shipping": None, "tax": "1.50"})
        assert (pricing.shipping, pricing.tax) == (Decimal("0"), Decimal("1.50"))

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            PricingOverridesDTO.model_validate({"discount": "-1"})
