"""Finance API views — payments, expenses, procurement, manufacturer wallet."""

import logging
from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiExample

from apps.authentication.permissions import require_role, FINANCE_ROLES
from apps.orders.models import Order
from .models import Expense, ManufacturerWallet, Payment, PaymentAccount, Purchase, SupplierPayment
from .service import PaymentService, ProcurementService, trip_profitability
from . import serializers as sz

logger = logging.getLogger("cementops.finance")
payment_service     = PaymentService()
procurement_service = ProcurementService()


class FinanceWriteMixin:
    """Reads are open to staff; writes need a finance role."""

    def create(self, request, *args, **kwargs):
        denied = require_role(request, FINANCE_ROLES)
        if denied:
            return denied
        return super().create(request, *args, **kwargs)


# ── Customer payments ─────────────────────────────────────────────────────────
@extend_schema(
    tags=["Finance"],
    summary="List payments or record one (cash/POS settle immediately)",
    examples=[
        OpenApiExample(
            "Bank transfer",
            value={"customer": "<uuid>", "order": "<uuid>", "amount": "250000.00",
                   "method": "transfer", "reference": "TRF-0091"},
        )
    ],
)
class PaymentListCreateView(FinanceWriteMixin, generics.ListCreateAPIView):
    serializer_class   = sz.PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["status", "method", "customer", "order"]
    search_fields      = ["reference", "customer__name"]
    queryset           = Payment.objects.select_related("customer", "order", "confirmed_by")

    def perform_create(self, serializer):
        d = dict(serializer.validated_data)
        customer, amount, method = d.pop("customer"), d.pop("amount"), d.pop("method")
        order = d.pop("order", None)
        serializer.instance = payment_service.record_payment(
            customer, amount, method, order=order, actor=self.request.user, **d,
        )


@extend_schema(tags=["Finance"], summary="Confirm or reject a pending payment",
               request=sz.PaymentConfirmSerializer, responses=sz.PaymentSerializer)
class PaymentConfirmView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, FINANCE_ROLES)
        if denied:
            return denied
        ser = sz.PaymentConfirmSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payment = payment_service.confirm_payment(pk, ser.validated_data["status"], actor=request.user)
        return Response(sz.PaymentSerializer(payment).data)


@extend_schema(tags=["Finance"], summary="Company bank / POS accounts")
class PaymentAccountListCreateView(FinanceWriteMixin, generics.ListCreateAPIView):
    queryset           = PaymentAccount.objects.filter(is_active=True)
    serializer_class   = sz.PaymentAccountSerializer
    permission_classes = [permissions.IsAuthenticated]


# ── Expenses ──────────────────────────────────────────────────────────────────
@extend_schema(tags=["Finance"], summary="List or record expenses")
class ExpenseListCreateView(generics.ListCreateAPIView):
    serializer_class   = sz.ExpenseSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["category", "order", "truck"]
    ordering_fields    = ["expense_date", "amount"]
    queryset           = Expense.objects.select_related("order", "truck")

    def perform_create(self, serializer):
        serializer.save(recorded_by=self.request.user)


@extend_schema(tags=["Finance"], summary="Retrieve, update or delete an expense")
class ExpenseDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class   = sz.ExpenseSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset           = Expense.objects.select_related("order", "truck")

    def perform_destroy(self, instance):
        logger.info("Expense %s (%s %s) deleted by %s",
                    instance.id, instance.category, instance.amount, self.request.user.phone)
        instance.delete()


# ── Supplier side ─────────────────────────────────────────────────────────────
@extend_schema(tags=["Procurement"], summary="List supplier payments or record one (prepayments fund the wallet)")
class SupplierPaymentListCreateView(FinanceWriteMixin, generics.ListCreateAPIView):
    serializer_class   = sz.SupplierPaymentSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["supplier", "payment_type"]
    queryset           = SupplierPayment.objects.select_related("supplier")

    def perform_create(self, serializer):
        d = dict(serializer.validated_data)
        supplier, amount, payment_type = d.pop("supplier"), d.pop("amount"), d.pop("payment_type")
        serializer.instance = procurement_service.record_supplier_payment(supplier, amount, payment_type, **d)


@extend_schema(tags=["Procurement"], summary="Manufacturer prepayment wallets")
class WalletListView(generics.ListAPIView):
    serializer_class   = sz.ManufacturerWalletSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["supplier", "cement_type"]
    queryset           = ManufacturerWallet.objects.select_related("supplier")


@extend_schema(tags=["Procurement"], summary="Deposits and draw-downs on one wallet")
class WalletTransactionListView(generics.ListAPIView):
    serializer_class   = sz.WalletTransactionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        wallet = generics.get_object_or_404(ManufacturerWallet, pk=self.kwargs["pk"])
        return wallet.transactions.all()


@extend_schema(tags=["Procurement"], summary="List purchases or raise a purchase order")
class PurchaseListCreateView(FinanceWriteMixin, generics.ListCreateAPIView):
    serializer_class   = sz.PurchaseSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["status", "supplier", "sales_order", "is_direct_delivery"]
    search_fields      = ["purchase_number", "atc_number"]
    queryset           = Purchase.objects.select_related("supplier")

    def perform_create(self, serializer):
        d = dict(serializer.validated_data)
        supplier, cement_type = d.pop("supplier"), d.pop("cement_type")
        quantity, cost_per_unit = d.pop("quantity"), d.pop("cost_per_unit", 0)
        draw = d.pop("draw_from_wallet", False)
        serializer.instance = procurement_service.create_purchase(
            supplier, cement_type, quantity, cost_per_unit, draw_from_wallet=draw, **d,
        )


@extend_schema(tags=["Procurement"], summary="Mark a purchase received or cancelled",
               request=sz.PurchaseStatusSerializer, responses=sz.PurchaseSerializer)
class PurchaseStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, FINANCE_ROLES)
        if denied:
            return denied
        ser = sz.PurchaseStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        purchase = generics.get_object_or_404(Purchase, pk=pk)
        purchase = procurement_service.set_purchase_status(purchase, ser.validated_data["status"])
        return Response(sz.PurchaseSerializer(purchase).data, status=status.HTTP_200_OK)


# ── Reports ───────────────────────────────────────────────────────────────────
@extend_schema(tags=["Finance"], summary="Revenue, expenses and margin for one trip",
               responses=sz.TripProfitabilitySerializer)
class TripProfitabilityView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        order = generics.get_object_or_404(Order, pk=pk)
        return Response(sz.TripProfitabilitySerializer(trip_profitability(order)).data)
