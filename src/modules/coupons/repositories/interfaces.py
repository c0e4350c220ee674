"""Coupon repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.coupons.models import Coupon


class ICouponRepository(IRepository["Coupon"]):
    """Repository contract for coupons."""

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[Coupon]:
        """Retrieve a coupon by its (case-insensitive) code."""

    @abstractmethod
    def increment_usage(self, coupon: Coupon) -> None:
        """Atomically add one to ``used_count``."""
