from django.urls import path
from .views import CustomerListCreateView, CustomerDetailView, CustomerBlockView, CustomerBalanceView

urlpatterns = [
    path("",                    CustomerListCreateView.as_view(), name="customer-list"),
    path("<uuid:pk>/",          CustomerDetailView.as_view(),     name="customer-detail"),
    path("<uuid:pk>/block/",    CustomerBlockView.as_view(),      name="customer-block"),
    path("<uuid:pk>/balance/",  CustomerBalanceView.as_view(),    name="customer-balance"),
]
