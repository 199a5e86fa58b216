from django.urls import path
from . import views as v

urlpatterns = [
    path("trucks/",                          v.TruckListCreateView.as_view(),              name="truck-list"),
    path("trucks/<uuid:pk>/",                v.TruckDetailView.as_view(),                  name="truck-detail"),
    path("drivers/",                         v.DriverListCreateView.as_view(),             name="driver-list"),
    path("drivers/<uuid:pk>/",               v.DriverDetailView.as_view(),                 name="driver-detail"),
    path("drivers/<uuid:pk>/wallet/",        v.DriverWalletView.as_view(),                 name="driver-wallet"),
    path("drivers/<uuid:pk>/transactions/",  v.DriverTransactionListCreateView.as_view(),  name="driver-transactions"),
    path("available/",                       v.AvailableUnitsView.as_view(),               name="fleet-available"),
    path("documents/",                       v.ComplianceDocumentListCreateView.as_view(), name="compliance-list"),
    path("documents/<uuid:pk>/",             v.ComplianceDocumentDetailView.as_view(),     name="compliance-detail"),
]
