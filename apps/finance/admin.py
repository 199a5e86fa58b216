from django.contrib import admin
from .models import (
    Expense, ManufacturerWallet, Payment, PaymentAccount, Purchase, SupplierPayment, WalletTransaction,
)


@admin.register(PaymentAccount)
class PaymentAccountAdmin(admin.ModelAdmin):
    list_display = ("name", "bank_name", "account_number", "is_active")


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display    = ("customer", "order", "amount", "method", "status", "payment_date", "confirmed_by")
    list_filter     = ("status", "method")
    search_fields   = ("reference", "customer__name")
    # Status changes go through PaymentService so the balance moves with them
    readonly_fields = ("status", "confirmed_by", "confirmed_at", "created_at", "updated_at")


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("category", "amount", "order", "truck", "expense_date")
    list_filter  = ("category",)


@admin.register(ManufacturerWallet)
class ManufacturerWalletAdmin(admin.ModelAdmin):
    list_display    = ("supplier", "cement_type", "balance", "updated_at")
    readonly_fields = ("balance",)


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ("wallet", "type", "amount", "order", "created_at")
    list_filter  = ("type",)


@admin.register(SupplierPayment)
class SupplierPaymentAdmin(admin.ModelAdmin):
    list_display = ("supplier", "payment_type", "cement_type", "amount", "payment_date")
    list_filter  = ("payment_type",)


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display  = ("purchase_number", "supplier", "cement_type", "quantity", "total_cost", "status")
    list_filter   = ("status", "is_direct_delivery")
    search_fields = ("purchase_number", "atc_number")
