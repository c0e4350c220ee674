"""Order domain constants.

There is no transition table: staff may move an order to any status.
Only the transitions into and out of ``CANCELLED`` (stock/sales
reconciliation) and into ``DELIVERED`` (timestamp) carry side effects.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"


class PaymentMethod(models.TextChoices):
    CARD = "card", "Card"
    STRIPE = "stripe", "Stripe"
    PAYPAL = "paypal", "PayPal"
    COD = "cod", "Cash on delivery"
    BANK = "bank", "Bank transfer"
    LOCAL = "local", "Local payment"
    SOCIAL = "social", "Social payment"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


# Orders in these states count as a completed purchase (review eligibility).
PURCHASED_STATES: frozenset[str] = frozenset(
    {OrderStatus.SHIPPED, OrderStatus.DELIVERED}
)

DEFAULT_CURRENCY = "USD"
