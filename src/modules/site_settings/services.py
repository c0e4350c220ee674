"""Site settings service layer.

The public projection always carries every known section, falling back
to defaults for anything the stored document omits.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Dict

import structlog
from django.db import transaction

from modules.core.exceptions import Forbidden, ValidationFailed

if TYPE_CHECKING:
    from modules.core.actors import Actor
    from modules.site_settings.models import SiteSettings
    from modules.site_settings.repositories.interfaces import ISiteSettingsRepository

logger = structlog.get_logger(__name__)

DEFAULT_SOCIAL = {"facebook_url": "", "whatsapp_url": ""}

PAYMENT_FLAGS = (
    "stripe_enabled",
    "cod_enabled",
    "paypal_enabled",
    "bank_enabled",
    "local_enabled",
    "social_enabled",
)

DEFAULT_TAX = {"enabled": True, "rate": 10}

DEFAULT_SHIPPING_METHODS = {
    "standard": {"enabled": True, "name": "Standard", "price": 10, "free_above": 50},
    "express": {"enabled": True, "name": "Express", "price": 20, "free_above": 0},
}


def public_payload(settings: SiteSettings) -> Dict[str, Any]:
    """Shopper-facing view of ``settings`` with defaults filled in."""
    data = settings.data or {}
    payments = data.get("payments") or {}
    tax = data.get("tax") or {}
    shipping = data.get("shipping") or {}

    public_payments: Dict[str, Any] = {
        flag: bool(payments.get(flag, False)) for flag in PAYMENT_FLAGS
    }
    public_payments["stripe_public_key"] = payments.get("stripe_public_key") or ""

    return {
        "social": data.get("social") or dict(DEFAULT_SOCIAL),
        "payments": public_payments,
        "tax": {
            "enabled": tax.get("enabled", DEFAULT_TAX["enabled"]),
            "rate": tax.get("rate", DEFAULT_TAX["rate"]),
        },
        "shipping": {
            "methods": shipping.get("methods")
            or copy.deepcopy(DEFAULT_SHIPPING_METHODS),
        },
        "updated_at": settings.updated_at,
    }


class SiteSettingsService:
    def __init__(self, repository: ISiteSettingsRepository) -> None:
        self._repo = repository

    def get_public(self) -> Dict[str, Any]:
        return public_payload(self._repo.get_or_create())

    def get_settings(self, actor: Actor) -> SiteSettings:
        self._require_admin(actor)
        return self._repo.get_or_create()

    @transaction.atomic
    def update_settings(self, changes: Dict[str, Any], actor: Actor) -> SiteSettings:
        """Merge ``changes`` into the document, replacing whole top-level keys.

        Raises:
            Forbidden: actor is not an admin.
            ValidationFailed: ``changes`` is not a JSON object.
        """
        self._require_admin(actor)
        if not isinstance(changes, dict):
            raise ValidationFailed("Settings must be a JSON object.")

        settings = self._repo.get_or_create()
        settings.data = {**(settings.data or {}), **changes}
        settings.updated_by_id = actor.user_id
        settings = self._repo.save(settings)

        logger.info(
            "site_settings.updated",
            user_id=actor.user_id,
            keys=sorted(changes),
        )
        return settings

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise Forbidden("Only administrators can manage settings.")
