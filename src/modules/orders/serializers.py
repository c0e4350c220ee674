"""Order DRF serializers for API output.

The serializer operates at the Interface layer (API Views).
Input is validated by the Pydantic DTOs in ``dtos.py``; business logic
lives in the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem, OrderStatusHistory


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for the item snapshot captured at purchase time."""

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "name",
            "image",
            "price",
            "currency",
            "quantity",
            "variant",
            "line_total",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = ["status", "note", "changed_by", "created_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)
    pricing = serializers.SerializerMethodField()
    payment = serializers.SerializerMethodField()
    coupon = serializers.SerializerMethodField()
    tracking = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_id",
            "status",
            "items",
            "shipping_address",
            "billing_address",
            "payment",
            "pricing",
            "coupon",
            "tracking",
            "currency",
            "customer_note",
            "status_history",
            "delivered_at",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_pricing(self, obj: Order) -> dict:
        return {
            "subtotal": str(obj.subtotal),
            "shipping": str(obj.shipping),
            "tax": str(obj.tax),
            "discount": str(obj.discount),
            "total": str(obj.total),
        }

    def get_payment(self, obj: Order) -> dict:
        return {
            "method": obj.payment_method,
            "status": obj.payment_status,
            "transaction_id": obj.payment_transaction_id,
            "paid_at": obj.paid_at,
        }

    def get_coupon(self, obj: Order) -> dict | None:
        if not obj.coupon_code:
            return None
        discount = obj.coupon_discount
        return {
            "code": obj.coupon_code,
            "discount": str(discount) if discount is not None else None,
        }

    def get_tracking(self, obj: Order) -> dict:
        return {
            "carrier": obj.tracking_carrier,
            "tracking_number": obj.tracking_number,
            "tracking_url": obj.tracking_url,
        }


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested history)."""

    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user_id",
            "status",
            "total",
            "currency",
            "item_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_item_count(self, obj: Order) -> int:
        return len(obj.items.all())
