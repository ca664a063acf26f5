"""URL configuration for the ShowRate project."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/", include("apps.core.api", namespace="core")),
    path("api/performances/", include("apps.performances.api", namespace="performances")),
    path("api/evaluations/", include("apps.evaluations.api", namespace="evaluations")),
]
