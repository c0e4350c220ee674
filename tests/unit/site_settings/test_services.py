"""Unit tests for SiteSettingsService and the public projection."""

import pytest

from modules.core.exceptions import Forbidden, ValidationFailed
from modules.site_settings.models import SiteSettings
from modules.site_settings.repositories.django_repository import (
    SiteSettingsDjangoRepository,
)
from modules.site_settings.services import (
    DEFAULT_SHIPPING_METHODS,
    PAYMENT_FLAGS,
    SiteSettingsService,
)

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return SiteSettingsService(SiteSettingsDjangoRepository())


class TestPublicSettings:
    def test_defaults_when_empty(self, service):
        public = service.get_public()

        assert public["tax"] == {"enabled": True, "rate": 10}
        assert public["shipping"]["methods"] == DEFAULT_SHIPPING_METHODS
        assert public["social"] == {"facebook_url": "", "whatsapp_url": ""}
        assert all(public["payments"][flag] is False for flag in PAYMENT_FLAGS)
        assert public["payments"]["stripe_public_key"] == ""

    def test_secrets_never_exposed(self, service, admin_actor):
        service.update_settings(
            {
                "payments": {
                    "stripe_enabled": True,
                    "stripe_public_key": "pk_test_123",
                    "stripe_secret_key": "sk_test_456",
                }
            },
            admin_actor,
        )

        payments = service.get_public()["payments"]

        assert payments["stripe_enabled"] is True
        assert payments["stripe_public_key"] == "pk_test_123"
        assert "stripe_secret_key" not in payments

    def test_single_document(self, service):
        service.get_public()
        service.get_public()
        assert SiteSettings.objects.count() == 1


class TestUpdateSettings:
    def test_merges_top_level_keys(self, service, admin_actor):
        service.update_settings({"tax": {"enabled": False, "rate": 7}}, admin_actor)
        settings = service.update_settings(
            {"social": {"facebook_url": "https://fb.example/shop"}}, admin_actor
        )

        assert settings.data["tax"] == {"enabled": False, "rate": 7}
        assert settings.data["social"] == {"facebook_url": "https://fb.example/shop"}
        assert settings.updated_by_id == admin_actor.user_id

    def test_editor_forbidden(self, service, editor_actor):
        with pytest.raises(Forbidden):
            service.update_settings({"tax": {}}, editor_actor)
        with pytest.raises(Forbidden):
            service.get_settings(editor_actor)

    def test_rejects_non_object(self, service, admin_actor):
        with pytest.raises(ValidationFailed):
            service.update_settings(["tax"], admin_actor)
