from django.urls import path
from . import views as v

urlpatterns = [
    path("orders/",                             v.OrderListCreateView.as_view(),     name="order-list"),
    path("orders/metrics/",                     v.OrderMetricsView.as_view(),        name="order-metrics"),
    path("orders/<uuid:pk>/",                   v.OrderDetailView.as_view(),         name="order-detail"),
    path("orders/<uuid:pk>/next/",              v.OrderAdvanceView.as_view(),        name="order-next"),
    path("orders/<uuid:pk>/dispatch/",          v.OrderDispatchView.as_view(),       name="order-dispatch"),
    path("orders/<uuid:pk>/status/",            v.OrderStatusView.as_view(),         name="order-status"),
    path("orders/<uuid:pk>/reassign/",          v.OrderReassignView.as_view(),       name="order-reassign"),
    path("orders/<uuid:pk>/reconcile/",         v.OrderReconcileView.as_view(),      name="order-reconcile"),
    path("orders/<uuid:pk>/confirm-payment/",   v.OrderConfirmPaymentView.as_view(), name="order-confirm-payment"),
    path("shortages/",                          v.ShortageListView.as_view(),        name="shortage-list"),
    path("depots/",                             v.DepotListCreateView.as_view(),     name="depot-list"),
    path("depots/<uuid:pk>/",                   v.DepotDetailView.as_view(),         name="depot-detail"),
    path("suppliers/",                          v.SupplierListCreateView.as_view(),  name="supplier-list"),
    path("suppliers/<uuid:pk>/",                v.SupplierDetailView.as_view(),      name="supplier-detail"),
    path("inventory/",                          v.InventoryListCreateView.as_view(), name="inventory-list"),
    path("inventory/<uuid:pk>/",                v.InventoryDetailView.as_view(),     name="inventory-detail"),
]
