"""RepairShop project – main URL configuration."""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path, re_path
from django.views.generic.base import RedirectView
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from api.v1.views.system_views import health

# -----------------------------------------------------------------------------
# Swagger / ReDoc API schema setup
# -----------------------------------------------------------------------------

schema_view = get_schema_view(
    openapi.Info(
        title="RepairShop API",
        default_version="v1",
        description="REST API for multi-location device repair shops",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

# -----------------------------------------------------------------------------
# URL patterns
# -----------------------------------------------------------------------------
urlpatterns = [
    path("admin/", admin.site.urls),
    # Application API (versioned)
    path("api/v1/", include("api.v1.urls")),
    re_path(
        r"^api/docs/swagger\.(?P<format>json|yaml)$",
        schema_view.without_ui(cache_timeout=0),
        name="schema-json",
    ),
    path(
        "api/docs/ui/",
        schema_view.with_ui("swagger", cache_timeout=0),
        name="schema-swagger-ui",
    ),
    path("api/redoc/", schema_view.with_ui("redoc", cache_timeout=0), name="schema-redoc"),
    # Load-balancer health check
    path("health/", health, name="health_check"),
    path("", RedirectView.as_view(url="/api/docs/ui/", permanent=False), name="home"),
]
