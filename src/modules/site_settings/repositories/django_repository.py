"""Django ORM implementation of the site settings repository."""

from __future__ import annotations

import structlog

from modules.site_settings.models import SINGLETON_KEY, SiteSettings
from modules.site_settings.repositories.interfaces import ISiteSettingsRepository

logger = structlog.get_logger(__name__)


class SiteSettingsDjangoRepository(ISiteSettingsRepository):
    def get_or_create(self) -> SiteSettings:
        settings, created = SiteSettings.objects.get_or_create(key=SINGLETON_KEY)
        if created:
            logger.info("site_settings.created", settings_id=str(settings.id))
        return settings

    def save(self, entity: SiteSettings) -> SiteSettings:
        entity.save()
        logger.info("site_settings.saved", keys=sorted(entity.data))
        return entity
