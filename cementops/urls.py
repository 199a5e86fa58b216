"""CementOps root URL configuration."""

from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenAPI / Interactive Docs
    path("api/schema/",  SpectacularAPIView.as_view(),       name="schema"),
    path("api/docs/",    SpectacularSwaggerView.as_view(), name="swagger-ui"),

    # Auth
    path("api/auth/",    include("apps.authentication.urls")),

    # Master data
    path("api/customers/", include("apps.customers.urls")),
    path("api/fleet/",     include("apps.fleet.urls")),

    # Core order lifecycle
    path("api/",           include("apps.orders.urls")),
    path("api/finance/",   include("apps.finance.urls")),
    path("api/documents/", include("apps.documents.urls")),

    # Notifications
    path("api/notifications/", include("apps.notifications.urls")),

    # Reports
    path("api/analytics/", include("apps.analytics.urls")),

    # Ops / Admin
    path("api/admin/",  include("apps.ops.urls")),
    path("api/health/", include("apps.ops.health_urls")),
    path("api/ops/",    include("apps.ops.ops_urls")),
]

# Prometheus metrics (only when installed)
try:
    import django_prometheus  # noqa: F401
    urlpatterns += [path("", include("django_prometheus.urls"))]
except ImportError:
    pass
