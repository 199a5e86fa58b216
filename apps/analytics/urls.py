from django.urls import path
from .views import (
    DualStreamView, TripProfitabilityReportView, PendingDeliveriesView,
    ExpiringDocumentsView, CustomerAgingView, FleetStatusView,
)

urlpatterns = [
    path("dual-stream/",          DualStreamView.as_view(),              name="analytics-dual-stream"),
    path("trips/profitability/",  TripProfitabilityReportView.as_view(), name="analytics-trips"),
    path("deliveries/pending/",   PendingDeliveriesView.as_view(),       name="analytics-pending"),
    path("documents/expiring/",   ExpiringDocumentsView.as_view(),       name="analytics-documents"),
    path("customers/aging/",      CustomerAgingView.as_view(),           name="analytics-aging"),
    path("fleet/status/",         FleetStatusView.as_view(),             name="analytics-fleet"),
]
