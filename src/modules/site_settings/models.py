"""Site-wide settings document (singleton)."""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel

SINGLETON_KEY = 1


class SiteSettings(BaseModel):
    """One free-form JSON document holding storefront configuration.

    Known top-level keys are ``social``, ``payments``, ``tax`` and
    ``shipping``; any other key is stored as-is.  ``key`` pins the table
    to a single row.
    """

    key = models.PositiveSmallIntegerField(
        default=SINGLETON_KEY, unique=True, editable=False
    )
    data = models.JSONField(default=dict, blank=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "site_settings"
        verbose_name_plural = "site settings"

    def __str__(self) -> str:
        return "Site settings"
