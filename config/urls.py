from django.urls import path, include
from django.shortcuts import redirect
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.common.views import health_check

urlpatterns = [
    path("", lambda request: redirect("/api/docs/")),

    # simple health (not under /v1)
    path("health/", health_check, name="health-check"),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("v1/health/", include("core.common.urls_health")),
    path("v1/", include("core.onboarding.urls")),
]
