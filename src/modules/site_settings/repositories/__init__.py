from modules.site_settings.repositories.django_repository import (
    SiteSettingsDjangoRepository,
)
from modules.site_settings.repositories.interfaces import ISiteSettingsRepository

__all__ = ["ISiteSettingsRepository", "SiteSettingsDjangoRepository"]
