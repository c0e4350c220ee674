"""Banner URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.banners.views import BannerViewSet

router = DefaultRouter(trailing_slash=True)
router.register("banners", BannerViewSet, basename="banner")

urlpatterns = router.urls
