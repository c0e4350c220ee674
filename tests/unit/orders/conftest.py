from __future__ import annotations

from decimal import Decimal

import pytest

from modules.coupons.repositories.django_repository import CouponDjangoRepository
from modules.orders.dtos import CreateOrderDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

SHIPPING_ADDRESS = {
    "name": "Ada Lovelace",
    "street": "12 Analytical Row",
    "city": "London",
    "zip_code": "N1 9GU",
    "country": "GB",
    "phone": "+44 20 0000 0000",
}


def build_order_dto(lines, **overrides) -> CreateOrderDTO:
    """``lines`` is a list of ``(product, quantity)`` or ``(product, quantity, variant)``."""
    items = []
    for line in lines:
        product, quantity = line[0], line[1]
        item = {"product_id": str(product.id), "quantity": quantity}
        if len(line) > 2:
            item["variant"] = line[2]
        items.append(item)

    data = {
        "items": items,
        "shipping_address": SHIPPING_ADDRESS,
        "payment": {"method": "card"},
    }
    data.update(overrides)
    return CreateOrderDTO.model_validate(data)


@pytest.fixture()
def order_dto():
    """Factory for ``CreateOrderDTO`` payloads."""
    return build_order_dto


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=ProductDjangoRepository(),
        coupon_repository=CouponDjangoRepository(),
    )


@pytest.fixture()
def tee(make_product):
    return make_product(name="Classic Tee", price=Decimal("20.00"), stock=10, sales=0)


@pytest.fixture()
def mug(make_product):
    return make_product(name="Blue Mug", price=Decimal("7.50"), stock=3, sales=4)


@pytest.fixture()
def ebook(make_product):
    return make_product(
        name="E-book", price=Decimal("5.00"), stock=0, sales=0, track_inventory=False
    )


@pytest.fixture()
def place_order(order_service, customer_actor, order_dto):
    """Place an order for ``customer_actor`` from ``(product, qty)`` lines."""

    def _place(lines, actor=None, **overrides):
        return order_service.create_order(
            order_dto(lines, **overrides), actor or customer_actor
        )

    return _place
