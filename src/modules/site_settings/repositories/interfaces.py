"""Site settings repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modules.site_settings.models import SiteSettings


class ISiteSettingsRepository(ABC):
    """The settings document is a singleton, so there is no id-based CRUD."""

    @abstractmethod
    def get_or_create(self) -> SiteSettings:
        """Return the settings row, creating an empty one if missing."""

    @abstractmethod
    def save(self, entity: SiteSettings) -> SiteSettings:
        """Persist the settings row."""
