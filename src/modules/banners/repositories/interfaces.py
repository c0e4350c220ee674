"""Banner repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.banners.models import Banner


class IBannerRepository(IRepository["Banner"]):
    @abstractmethod
    def currently_active(self, now: datetime) -> Iterable[Banner]:
        """Active banners whose date window contains ``now``."""
