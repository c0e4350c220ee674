from django.urls import path

from modules.site_settings.views import PublicSettingsView, SettingsView

urlpatterns = [
    path("settings/public/", PublicSettingsView.as_view(), name="settings-public"),
    path("settings/", SettingsView.as_view(), name="settings"),
]
