from django.urls import path

from modules.core.views import CurrentActorView, health_check

urlpatterns = [
    path("health", health_check, name="health_check"),
    path("api/v1/me", CurrentActorView.as_view(), name="current_actor"),
]
