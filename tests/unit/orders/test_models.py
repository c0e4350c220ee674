"""Unit tests for Order model helpers."""

import re
from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.orders.models import Order

pytestmark = pytest.mark.unit


class TestOrderNumber:
    @freeze_time("2026-03-05 12:00:00")
    def test_format(self):
        number = Order.generate_order_number()

        assert re.fullmatch(r"ORD-20260305-000000\d{3}", number)

    def test_assigned_on_first_save_only(self, place_order, tee):
        order = place_order([(tee, 1)])
        number = order.order_number

        order.customer_note = "leave at the door"
        order.save()
        order.refresh_from_db()

        assert order.order_number == number


class TestOrderItem:
    def test_line_total(self, place_order, tee):
        order = place_order([(tee, 3)])
        assert order.items.get().line_total == Decimal("60.00")

    def test_items_keep_position(self, place_order, tee, mug, ebook):
        order = place_order([(ebook, 1), (tee, 1), (mug, 1)])
        assert list(order.items.values_list("position", flat=True)) == [0, 1, 2]
