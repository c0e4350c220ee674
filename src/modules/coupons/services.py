"""Coupon service layer.

Admins manage coupons; any authenticated user may check whether a code
applies to a purchase amount.  The order service reuses
``is_coupon_valid`` directly when an order is placed.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Tuple

import structlog
from django.utils import timezone

from modules.core.exceptions import Forbidden
from modules.coupons.exceptions import (
    CouponAlreadyExists,
    CouponNotFound,
    InvalidCoupon,
)
from modules.coupons.models import Coupon
from modules.coupons.validation import compute_discount, is_coupon_valid

if TYPE_CHECKING:
    from modules.core.actors import Actor
    from modules.coupons.dtos import CreateCouponDTO
    from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)


class CouponService:
    def __init__(self, repository: ICouponRepository) -> None:
        self._repo = repository

    def create_coupon(self, dto: CreateCouponDTO, actor: Actor) -> Coupon:
        """Create a coupon (admin only).

        Raises:
            Forbidden: actor is not an admin.
            CouponAlreadyExists: the code is taken.
        """
        self._require_admin(actor)
        if self._repo.get_by_code(dto.code):
            raise CouponAlreadyExists(f"Coupon '{dto.code}' already exists.")
        coupon = self._repo.save(Coupon(**dto.model_dump()))
        logger.info("coupon.created", coupon_id=str(coupon.id), code=coupon.code)
        return coupon

    def list_coupons(self, actor: Actor):
        self._require_admin(actor)
        return self._repo.list()

    def get_coupon(self, id: str, actor: Actor) -> Coupon:
        self._require_admin(actor)
        coupon = self._repo.get_by_id(id)
        if not coupon:
            raise CouponNotFound(f"Coupon {id} not found.")
        return coupon

    def validate(self, code: str, amount: Decimal) -> Tuple[Coupon, Decimal]:
        """Return the coupon for ``code`` and the discount it grants on ``amount``.

        Raises:
            InvalidCoupon: unknown code, or the coupon is not redeemable now
                for this amount.
        """
        coupon = self._repo.get_by_code(code) if code else None
        if coupon is None or not is_coupon_valid(coupon, timezone.now(), amount):
            logger.info("coupon.rejected", code=code, amount=str(amount))
            raise InvalidCoupon(code=code)
        return coupon, compute_discount(coupon, amount)

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise Forbidden("Only administrators can manage coupons.")


def coupon_payload(coupon: Coupon, discount: Decimal) -> Dict[str, object]:
    return {
        "code": coupon.code,
        "discount_type": coupon.discount_type,
        "discount_value": str(coupon.discount_value),
        "discount": str(discount),
    }
