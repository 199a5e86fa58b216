from django.urls import path
from .views import OrderDocumentView, ReceiptView, StatementView

urlpatterns = [
    path("orders/<uuid:pk>/<slug:kind>/",    OrderDocumentView.as_view(), name="order-document"),
    path("payments/<uuid:pk>/receipt/",      ReceiptView.as_view(),       name="payment-receipt"),
    path("customers/<uuid:pk>/statement/",   StatementView.as_view(),     name="customer-statement"),
]
