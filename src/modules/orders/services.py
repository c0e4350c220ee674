"""Order service layer (Use Cases).

Orchestrates order creation, status management, and cancellation.
All write operations are atomic: the service defines the unit-of-work
boundary, so a failure part-way through leaves every product untouched.

Business rules enforced:
- Items are processed in request order; each product row is locked
  (SELECT FOR UPDATE) before its stock is checked and consumed.
- Tracked stock must cover the requested quantity; ``sales`` always moves.
- Entering ``cancelled`` restocks every item and stamps ``cancelled_at``.
- Leaving ``cancelled`` re-consumes every item, failing on short stock.
- Entering ``delivered`` stamps ``delivered_at``.
- Every effective transition appends one history entry; creation and
  same-status updates append none.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.core.exceptions import Forbidden
from modules.coupons.validation import is_coupon_valid
from modules.orders.constants import DEFAULT_CURRENCY, OrderStatus, PaymentStatus
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderNotFound,
)
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.core.actors import Actor
    from modules.coupons.models import Coupon
    from modules.coupons.repositories.interfaces import ICouponRepository
    from modules.orders.dtos import CreateOrderDTO, TrackingDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def _insufficient_stock(product: Product, requested: int) -> InsufficientStock:
    return InsufficientStock(
        f"Insufficient stock for {product.name}.",
        product_id=str(product.id),
        product_name=product.name,
        requested=requested,
        available=product.stock,
    )


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        coupon_repository: ICouponRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._coupon_repo = coupon_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO, actor: Actor) -> Order:
        """Create a new order, consuming stock and recording sales.

        Steps, per item in request order:
        1. Lock the product row; missing or deleted products fail.
        2. Check tracked stock.
        3. Snapshot name, image, price and currency.
        4. Consume stock/sales and persist the product.

        Then compute pricing, persist the order, and count the coupon use.

        Raises:
            Forbidden: anonymous actor.
            ProductNotFound: a product does not exist.
            InsufficientStock: tracked stock is below the requested quantity.
        """
        if actor.user_id is None:
            raise Forbidden("Authentication required to place an order.")

        log = logger.bind(user_id=actor.user_id, item_count=len(dto.items))
        log.info("order.creation_started")

        subtotal = Decimal("0")
        snapshots: List[Dict[str, Any]] = []

        for item in dto.items:
            product = self._product_repo.get_for_update(str(item.product_id))
            if product is None or product.is_deleted:
                raise ProductNotFound(f"Product {item.product_id} not found.")
            if not product.has_stock_for(item.quantity):
                log.warning(
                    "order.insufficient_stock",
                    product_id=str(product.id),
                    requested=item.quantity,
                    available=product.stock,
                )
                raise _insufficient_stock(product, item.quantity)

            subtotal += product.price * item.quantity
            snapshots.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "image": product.primary_image,
                    "price": product.price,
                    "currency": product.currency,
                    "quantity": item.quantity,
                    "variant": item.variant,
                }
            )

            product.consume(item.quantity)
            self._product_repo.save_inventory(product)
            log.info(
                "order.stock_consumed",
                product_id=str(product.id),
                quantity=item.quantity,
                remaining=product.stock,
                sales=product.sales,
            )

        pricing = dto.pricing
        total = subtotal + pricing.shipping + pricing.tax - pricing.discount

        coupon_code = dto.coupon_code
        coupon = self._resolve_coupon(coupon_code, subtotal)

        shipping_address = dto.shipping_address.model_dump()
        billing_address = (
            dto.billing_address.model_dump() if dto.billing_address else shipping_address
        )

        order = self._order_repo.create(
            {
                "user_id": actor.user_id,
                "items": snapshots,
                "shipping_address": shipping_address,
                "billing_address": billing_address,
                "payment_method": dto.payment.method,
                "payment_status": dto.payment.status,
                "payment_transaction_id": dto.payment.transaction_id,
                "paid_at": (
                    timezone.now()
                    if dto.payment.status == PaymentStatus.COMPLETED
                    else None
                ),
                "subtotal": subtotal,
                "shipping": pricing.shipping,
                "tax": pricing.tax,
                "discount": pricing.discount,
                "total": total,
                "coupon_code": coupon_code,
                "coupon_discount": dto.coupon.discount if dto.coupon else None,
                "customer_note": dto.customer_note,
                "currency": snapshots[0]["currency"] if snapshots else DEFAULT_CURRENCY,
            }
        )

        if coupon is not None:
            self._record_coupon_use(coupon, order)

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            total=str(total),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(
        self,
        order_id: str,
        new_status: str,
        actor: Actor,
        note: str = "",
    ) -> Order:
        """Move an order to ``new_status`` and apply its side effects.

        Any status may follow any other.  A same-status request is a no-op
        that returns the current order without a history entry.

        Raises:
            Forbidden: actor is not an admin or editor.
            OrderNotFound: order does not exist.
            InvalidOrderStatus: ``new_status`` is not a known status.
            InsufficientStock: reinstating a cancelled order needs more
                stock than is available; nothing is changed.
        """
        if not actor.is_staff_member:
            raise Forbidden("Only administrators and editors can change order status.")

        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(
                f"Unknown order status '{new_status}'.",
                allowed=list(OrderStatus.values),
            )

        return self._transition(order, new_status, actor, note)

    @transaction.atomic
    def cancel_own_order(self, order_id: str, actor: Actor, note: str = "") -> Order:
        """Cancel an order on behalf of its owner (or an admin).

        Restocks every item exactly like a staff cancellation.  Cancelling
        an already-cancelled order is a no-op.

        Raises:
            OrderNotFound: order does not exist.
            Forbidden: actor is neither the owner nor an admin.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not (actor.owns(order.user_id) or actor.is_admin):
            raise Forbidden("Not authorized to cancel this order.")

        return self._transition(
            order, OrderStatus.CANCELLED, actor, note or "Cancelled by customer"
        )

    @transaction.atomic
    def update_tracking(self, order_id: str, tracking: TrackingDTO, actor: Actor) -> Order:
        """Replace the tracking details of an order (admin/editor).

        Raises:
            Forbidden: actor is not an admin or editor.
            OrderNotFound: order does not exist.
        """
        if not actor.is_staff_member:
            raise Forbidden("Only administrators and editors can update tracking.")

        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        order.tracking_carrier = tracking.carrier
        order.tracking_number = tracking.tracking_number
        order.tracking_url = tracking.tracking_url
        self._order_repo.save(order)

        logger.info(
            "order.tracking_updated",
            order_id=str(order.id),
            carrier=tracking.carrier,
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str, actor: Actor) -> Order:
        """Retrieve a single order visible to ``actor``.

        Raises:
            OrderNotFound: if the order does not exist.
            Forbidden: actor is neither the owner nor an admin.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        if not (actor.owns(order.user_id) or actor.is_admin):
            raise Forbidden("Not authorized to view this order.")
        return order

    def list_orders(self, actor: Actor, status: Optional[str] = None):
        """Admins see every order; everyone else sees their own."""
        filters: Dict[str, Any] = {}
        if not actor.is_admin:
            filters["user_id"] = actor.user_id
        if status:
            filters["status"] = status
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(
        self, order: Order, new_status: str, actor: Actor, note: str
    ) -> Order:
        note = note or ""
        old_status = order.status
        log = logger.bind(
            order_id=str(order.id),
            old_status=old_status,
            new_status=new_status,
        )

        if new_status == old_status:
            log.info("order.status_unchanged")
            return self._order_repo.get_by_id(str(order.id)) or order

        now = timezone.now()
        if new_status == OrderStatus.CANCELLED:
            self._restock_items(order)
            order.cancelled_at = now
        elif order.is_cancelled:
            self._reconsume_items(order)
            order.cancelled_at = None

        if new_status == OrderStatus.DELIVERED:
            order.delivered_at = now

        order.status = new_status
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            note=note,
            changed_by_id=actor.user_id,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    def _locked_products(self, order: Order):
        """Yield ``(item, product)`` pairs, skipping products that are gone."""
        for item in order.items.all():
            product = self._product_repo.get_for_update(str(item.product_id))
            if product is None or product.is_deleted:
                logger.warning(
                    "order.reconcile_product_missing",
                    order_id=str(order.id),
                    product_id=str(item.product_id),
                )
                continue
            yield item, product

    def _restock_items(self, order: Order) -> None:
        for item, product in self._locked_products(order):
            product.restock(item.quantity)
            self._product_repo.save_inventory(product)

    def _reconsume_items(self, order: Order) -> None:
        for item, product in self._locked_products(order):
            if not product.has_stock_for(item.quantity):
                logger.warning(
                    "order.reinstate_insufficient_stock",
                    order_id=str(order.id),
                    product_id=str(product.id),
                    requested=item.quantity,
                    available=product.stock,
                )
                raise _insufficient_stock(product, item.quantity)
            product.consume(item.quantity)
            self._product_repo.save_inventory(product)

    def _resolve_coupon(self, code: str, subtotal: Decimal) -> Optional[Coupon]:
        if not code:
            return None
        coupon = self._coupon_repo.get_by_code(code)
        if coupon is None or not is_coupon_valid(coupon, timezone.now(), subtotal):
            logger.info("order.coupon_not_applied", code=code)
            return None
        return coupon

    def _record_coupon_use(self, coupon: Coupon, order: Order) -> None:
        """Count one use of ``coupon``; a failure here never fails the order."""
        try:
            with transaction.atomic():
                self._coupon_repo.increment_usage(coupon)
        except DatabaseError as exc:
            logger.warning(
                "order.coupon_usage_failed",
                order_id=str(order.id),
                code=coupon.code,
                error=str(exc),
            )
