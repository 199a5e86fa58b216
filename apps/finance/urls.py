from django.urls import path
from . import views as v

urlpatterns = [
    path("payments/",                        v.PaymentListCreateView.as_view(),         name="payment-list"),
    path("payments/<uuid:pk>/confirm/",      v.PaymentConfirmView.as_view(),            name="payment-confirm"),
    path("accounts/",                        v.PaymentAccountListCreateView.as_view(),  name="payment-account-list"),
    path("expenses/",                        v.ExpenseListCreateView.as_view(),         name="expense-list"),
    path("expenses/<uuid:pk>/",              v.ExpenseDetailView.as_view(),             name="expense-detail"),
    path("supplier-payments/",               v.SupplierPaymentListCreateView.as_view(), name="supplier-payment-list"),
    path("wallets/",                         v.WalletListView.as_view(),                name="wallet-list"),
    path("wallets/<uuid:pk>/transactions/",  v.WalletTransactionListView.as_view(),     name="wallet-transactions"),
    path("purchases/",                       v.PurchaseListCreateView.as_view(),        name="purchase-list"),
    path("purchases/<uuid:pk>/status/",      v.PurchaseStatusView.as_view(),            name="purchase-status"),
    path("trips/<uuid:pk>/profitability/",   v.TripProfitabilityView.as_view(),         name="trip-profitability"),
]
