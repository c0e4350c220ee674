"""Unit tests for order status transitions and inventory reconciliation."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.core.exceptions import Forbidden
from modules.orders.constants import OrderStatus
from modules.orders.dtos import TrackingDTO
from modules.orders.exceptions import InsufficientStock, InvalidOrderStatus, OrderNotFound
from modules.orders.models import Order, OrderStatusHistory

pytestmark = pytest.mark.unit


def _stock_and_sales(*products):
    result = []
    for product in products:
        product.refresh_from_db()
        result.append((product.stock, product.sales))
    return result


def _history(order):
    return list(
        OrderStatusHistory.objects.filter(order_id=order.id).values_list("status", flat=True)
    )


# ===========================================================================
# update_status
# ===========================================================================


class TestUpdateStatusGuards:
    def test_customer_cannot_change_status(self, order_service, place_order, tee, customer_actor):
        order = place_order([(tee, 1)])
        with pytest.raises(Forbidden):
            order_service.update_status(order.id, OrderStatus.PROCESSING, customer_actor)

    def test_unknown_status(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 1)])
        with pytest.raises(InvalidOrderStatus) as exc_info:
            order_service.update_status(order.id, "teleported", editor_actor)
        assert "pending" in exc_info.value.details["allowed"]

    def test_missing_order(self, order_service, editor_actor):
        with pytest.raises(OrderNotFound):
            order_service.update_status(uuid4(), OrderStatus.SHIPPED, editor_actor)


class TestUpdateStatus:
    def test_plain_transition_leaves_inventory(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 2)])

        updated = order_service.update_status(
            order.id, OrderStatus.PROCESSING, editor_actor, note="packing"
        )

        assert updated.status == OrderStatus.PROCESSING
        assert _stock_and_sales(tee) == [(8, 2)]
        entry = OrderStatusHistory.objects.get(order_id=order.id)
        assert (entry.status, entry.note) == (OrderStatus.PROCESSING, "packing")
        assert entry.changed_by_id == editor_actor.user_id

    def test_cancel_restocks_and_stamps(self, order_service, place_order, tee, mug, admin_actor):
        order = place_order([(tee, 2), (mug, 3)])

        updated = order_service.update_status(order.id, OrderStatus.CANCELLED, admin_actor)

        assert updated.cancelled_at is not None
        assert _stock_and_sales(tee, mug) == [(10, 0), (3, 4)]

    def test_restock_floors_sales_at_zero(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 3)])
        tee.refresh_from_db()
        tee.sales = 1
        tee.save()

        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)

        assert _stock_and_sales(tee) == [(10, 0)]

    def test_reinstate_reconsumes(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 4)])
        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)

        updated = order_service.update_status(order.id, OrderStatus.PENDING, editor_actor)

        assert updated.cancelled_at is None
        assert _stock_and_sales(tee) == [(6, 4)]
        assert _history(order) == [OrderStatus.CANCELLED, OrderStatus.PENDING]

    def test_reinstate_with_short_stock_changes_nothing(
        self, order_service, place_order, tee, mug, editor_actor
    ):
        order = place_order([(tee, 2), (mug, 3)])
        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)
        mug.refresh_from_db()
        mug.stock = 1
        mug.save()

        with pytest.raises(InsufficientStock):
            order_service.update_status(order.id, OrderStatus.PROCESSING, editor_actor)

        assert Order.objects.get(pk=order.pk).status == OrderStatus.CANCELLED
        assert _stock_and_sales(tee, mug) == [(10, 0), (1, 4)]
        assert _history(order) == [OrderStatus.CANCELLED]

    def test_missing_note_stored_empty(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 1)])

        order_service.update_status(order.id, OrderStatus.SHIPPED, editor_actor, note=None)

        assert OrderStatusHistory.objects.get(order_id=order.id).note == ""

    def test_same_status_is_noop(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 1)])

        updated = order_service.update_status(order.id, OrderStatus.PENDING, editor_actor)

        assert updated.status == OrderStatus.PENDING
        assert _history(order) == []

    def test_double_cancel_does_not_restock_twice(
        self, order_service, place_order, tee, editor_actor
    ):
        order = place_order([(tee, 2)])
        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)
        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)

        assert _stock_and_sales(tee) == [(10, 0)]
        assert _history(order) == [OrderStatus.CANCELLED]

    def test_delivered_stamps_delivery(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 1)])

        updated = order_service.update_status(order.id, OrderStatus.DELIVERED, editor_actor)

        assert updated.delivered_at is not None
        assert updated.cancelled_at is None

    def test_any_status_may_follow_any_other(
        self, order_service, place_order, tee, editor_actor
    ):
        order = place_order([(tee, 1)])
        path = [
            OrderStatus.DELIVERED,
            OrderStatus.PENDING,
            OrderStatus.SHIPPED,
            OrderStatus.PROCESSING,
        ]
        for status in path:
            order_service.update_status(order.id, status, editor_actor)

        assert _history(order) == path

    def test_cancel_round_trip_restores_inventory(
        self, order_service, place_order, tee, ebook, editor_actor
    ):
        order = place_order([(tee, 3), (ebook, 2)])
        before = _stock_and_sales(tee, ebook)

        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)
        order_service.update_status(order.id, OrderStatus.SHIPPED, editor_actor)

        assert _stock_and_sales(tee, ebook) == before

    def test_untracked_product_only_moves_sales(
        self, order_service, place_order, ebook, editor_actor
    ):
        order = place_order([(ebook, 5)])
        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)

        assert _stock_and_sales(ebook) == [(0, 0)]

    def test_soft_deleted_product_skipped(
        self, order_service, place_order, tee, mug, editor_actor
    ):
        order = place_order([(tee, 2), (mug, 1)])
        mug.delete()

        order_service.update_status(order.id, OrderStatus.CANCELLED, editor_actor)

        assert _stock_and_sales(tee, mug) == [(10, 0), (2, 5)]


# ===========================================================================
# cancel_own_order
# ===========================================================================


class TestCancelOwnOrder:
    def test_owner_cancels(self, order_service, place_order, tee, customer_actor):
        order = place_order([(tee, 2)])

        updated = order_service.cancel_own_order(order.id, customer_actor)

        assert updated.status == OrderStatus.CANCELLED
        assert _stock_and_sales(tee) == [(10, 0)]
        entry = OrderStatusHistory.objects.get(order_id=order.id)
        assert entry.note == "Cancelled by customer"

    def test_other_customer_forbidden(self, order_service, place_order, tee, other_actor):
        order = place_order([(tee, 1)])
        with pytest.raises(Forbidden):
            order_service.cancel_own_order(order.id, other_actor)
        assert _stock_and_sales(tee) == [(9, 1)]

    def test_admin_may_cancel(self, order_service, place_order, tee, admin_actor):
        order = place_order([(tee, 1)])
        updated = order_service.cancel_own_order(order.id, admin_actor, note="fraud check")
        assert updated.status == OrderStatus.CANCELLED
        assert _history(order) == [OrderStatus.CANCELLED]

    def test_editor_is_not_owner(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 1)])
        with pytest.raises(Forbidden):
            order_service.cancel_own_order(order.id, editor_actor)

    def test_already_cancelled_is_noop(self, order_service, place_order, tee, customer_actor):
        order = place_order([(tee, 2)])
        order_service.cancel_own_order(order.id, customer_actor)
        order_service.cancel_own_order(order.id, customer_actor)

        assert _stock_and_sales(tee) == [(10, 0)]
        assert _history(order) == [OrderStatus.CANCELLED]

    def test_missing_order(self, order_service, customer_actor):
        with pytest.raises(OrderNotFound):
            order_service.cancel_own_order(uuid4(), customer_actor)


# ===========================================================================
# Tracking and queries
# ===========================================================================


class TestTracking:
    def test_staff_sets_tracking(self, order_service, place_order, tee, editor_actor):
        order = place_order([(tee, 1)])
        dto = TrackingDTO(carrier="DHL", tracking_number="JD0001", tracking_url="https://dhl.example/JD0001")

        updated = order_service.update_tracking(order.id, dto, editor_actor)

        assert (updated.tracking_carrier, updated.tracking_number) == ("DHL", "JD0001")
        assert _history(order) == []

    def test_customer_cannot_set_tracking(self, order_service, place_order, tee, customer_actor):
        order = place_order([(tee, 1)])
        with pytest.raises(Forbidden):
            order_service.update_tracking(order.id, TrackingDTO(carrier="DHL"), customer_actor)


class TestQueries:
    def test_owner_and_admin_can_view(
        self, order_service, place_order, tee, customer_actor, admin_actor
    ):
        order = place_order([(tee, 1)])
        assert order_service.get_order(order.id, customer_actor).pk == order.pk
        assert order_service.get_order(order.id, admin_actor).pk == order.pk

    def test_other_customer_cannot_view(self, order_service, place_order, tee, other_actor):
        order = place_order([(tee, 1)])
        with pytest.raises(Forbidden):
            order_service.get_order(order.id, other_actor)

    def test_missing_order(self, order_service, admin_actor):
        with pytest.raises(OrderNotFound):
            order_service.get_order(uuid4(), admin_actor)

    def test_list_scoped_to_owner(
        self, order_service, place_order, tee, customer_actor, other_actor, admin_actor
    ):
        mine = place_order([(tee, 1)])
        theirs = place_order([(tee, 1)], actor=other_actor)

        assert [o.pk for o in order_service.list_orders(customer_actor)] == [mine.pk]
        assert {o.pk for o in order_service.list_orders(admin_actor)} == {mine.pk, theirs.pk}

    def test_list_filters_by_status(self, order_service, place_order, tee, editor_actor, admin_actor):
        first = place_order([(tee, 1)])
        place_order([(tee, 1)])
        order_service.update_status(first.id, OrderStatus.SHIPPED, editor_actor)

        shipped = order_service.list_orders(admin_actor, status=OrderStatus.SHIPPED)
        assert [o.pk for o in shipped] == [first.pk]
