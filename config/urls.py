"""Root URL configuration.

All API routes are versioned under /api/v1/; schema, docs and health sit at
the top level.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import health

admin.site.site_header = "AssetDesk Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    # Versioned v1 routes only
    path("api/v1/", include("users.urls")),
    path("api/v1/inventory/", include("inventory.urls")),
    path("api/v1/requests/", include("asset_requests.urls")),
    path("api/v1/assignments/", include("assignments.urls")),
    path("api/v1/history/", include("history.urls")),
]
