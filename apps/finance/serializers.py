"""Finance serializers."""

from rest_framework import serializers
from .models import (
    Expense, ManufacturerWallet, Payment, PaymentAccount, Purchase, SupplierPayment, WalletTransaction,
)


class PaymentAccountSerializer(serializers.ModelSerializer):
    class Meta:
        model  = PaymentAccount
        fields = ["id", "name", "bank_name", "account_number", "is_active"]


class PaymentSerializer(serializers.ModelSerializer):
    customer_name     = serializers.CharField(source="customer.name", read_only=True)
    order_number      = serializers.CharField(source="order.order_number", read_only=True, default=None)
    confirmed_by_name = serializers.CharField(source="confirmed_by.full_name", read_only=True, default=None)

    class Meta:
        model  = Payment
        fields = [
            "id", "customer", "customer_name", "order", "order_number", "account",
            "amount", "method", "reference", "status", "payment_date", "notes",
            "confirmed_by_name", "confirmed_at", "created_at",
        ]
        read_only_fields = ["id", "status", "confirmed_at", "created_at"]


class PaymentConfirmSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        (Payment.Status.CONFIRMED, "Confirmed"),
        (Payment.Status.REJECTED,  "Rejected"),
    ])


class ExpenseSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)
    truck_plate  = serializers.CharField(source="truck.plate_number", read_only=True, default=None)

    class Meta:
        model  = Expense
        fields = [
            "id", "order", "order_number", "truck", "truck_plate", "category",
            "amount", "description", "expense_date", "created_at",
        ]
        read_only_fields = ["id", "created_at"]


class WalletTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model  = WalletTransaction
        fields = ["id", "type", "amount", "description", "order", "created_at"]


class ManufacturerWalletSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)

    class Meta:
        model  = ManufacturerWallet
        fields = ["id", "supplier", "supplier_name", "cement_type", "unit", "balance", "updated_at"]


class SupplierPaymentSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)

    class Meta:
        model  = SupplierPayment
        fields = [
            "id", "supplier", "supplier_name", "wallet", "payment_type", "cement_type",
            "amount", "payment_date", "reference", "period_covered", "method", "notes",
            "created_at",
        ]
        read_only_fields = ["id", "wallet", "created_at"]

    def validate(self, data):
        if data.get("payment_type") == SupplierPayment.PaymentType.PREPAYMENT and not data.get("cement_type"):
            raise serializers.ValidationError({"cement_type": "Required for prepayments (wallet key)."})
        return data


class PurchaseSerializer(serializers.ModelSerializer):
    supplier_name    = serializers.CharField(source="supplier.name", read_only=True)
    draw_from_wallet = serializers.BooleanField(write_only=True, required=False, default=False)

    class Meta:
        model  = Purchase
        fields = [
            "id", "purchase_number", "supplier", "supplier_name", "cement_type", "quantity",
            "unit", "cost_per_unit", "total_cost", "destination_depot", "sales_order",
            "is_direct_delivery", "wallet", "atc_number", "cap_number", "status",
            "purchase_date", "notes", "draw_from_wallet", "created_at",
        ]
        read_only_fields = ["id", "purchase_number", "total_cost", "wallet", "status", "created_at"]


class PurchaseStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        (Purchase.Status.RECEIVED,  "Received"),
        (Purchase.Status.CANCELLED, "Cancelled"),
    ])


class TripProfitabilitySerializer(serializers.Serializer):
    order_number          = serializers.CharField()
    revenue               = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_expenses        = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_profit            = serializers.DecimalField(max_digits=14, decimal_places=2)
    profit_margin_percent = serializers.DecimalField(max_digits=7, decimal_places=2)
