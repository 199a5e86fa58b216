"""
Finance models — customer payments, trip/overhead expenses, supplier-side
procurement and the manufacturer prepayment wallet.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils import timezone

from apps.orders.models import Order


class PaymentAccount(models.Model):
    """Company bank / POS account a customer pays into."""
    name           = models.CharField(max_length=120)
    bank_name      = models.CharField(max_length=120, blank=True)
    account_number = models.CharField(max_length=20, blank=True)
    is_active      = models.BooleanField(default=True)

    def __str__(self):
        return f"{self.name} ({self.bank_name})" if self.bank_name else self.name


class Payment(models.Model):

    class Method(models.TextChoices):
        CASH     = "cash",     "Cash"
        POS      = "pos",      "POS"
        TRANSFER = "transfer", "Bank Transfer"
        CHEQUE   = "cheque",   "Cheque"

    class Status(models.TextChoices):
        PENDING   = "Pending",   "Pending"
        CONFIRMED = "Confirmed", "Confirmed"
        REJECTED  = "Rejected",  "Rejected"

    AUTO_CONFIRMED_METHODS = (Method.CASH, Method.POS)

    id           = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer     = models.ForeignKey("customers.Customer", on_delete=models.PROTECT, related_name="payments")
    order        = models.ForeignKey(Order, on_delete=models.PROTECT, null=True, blank=True,
                                     related_name="payments")
    account      = models.ForeignKey(PaymentAccount, on_delete=models.SET_NULL, null=True, blank=True,
                                     related_name="payments")
    amount       = models.DecimalField(max_digits=14, decimal_places=2,
                                       validators=[MinValueValidator(Decimal("0.01"))])
    method       = models.CharField(max_length=8, choices=Method.choices)
    reference    = models.CharField(max_length=80, blank=True)
    status       = models.CharField(max_length=9, choices=Status.choices, default=Status.PENDING)
    payment_date = models.DateField(default=timezone.localdate)
    notes        = models.TextField(blank=True)
    recorded_by  = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                     null=True, blank=True, related_name="recorded_payments")
    confirmed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                     null=True, blank=True, related_name="confirmed_payments")
    confirmed_at = models.DateTimeField(null=True, blank=True)
    created_at   = models.DateTimeField(auto_now_add=True)
    updated_at   = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-payment_date", "-created_at"]
        indexes  = [
            models.Index(fields=["status"],             name="payment_status_idx"),
            models.Index(fields=["customer", "status"], name="payment_customer_status_idx"),
        ]

    def __str__(self):
        return f"{self.customer} – {self.status} ({self.amount})"


class Expense(models.Model):

    class Category(models.TextChoices):
        FUEL             = "fuel",             "Fuel"
        DRIVER_ALLOWANCE = "driver_allowance", "Driver Allowance"
        TRANSPORT        = "transport",        "Transport"
        TOLL             = "toll",             "Toll"
        SALARY           = "salary",           "Salary"
        MAINTENANCE      = "maintenance",      "Maintenance"
        INSURANCE        = "insurance",        "Insurance"
        LICENSE          = "license",          "Licence"
        OFFICE           = "office",           "Office"
        OTHER            = "other",            "Other"

    id           = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order        = models.ForeignKey(Order, on_delete=models.PROTECT, null=True, blank=True,
                                     related_name="expenses")
    truck        = models.ForeignKey("fleet.Truck", on_delete=models.SET_NULL, null=True, blank=True,
                                     related_name="expenses")
    category     = models.CharField(max_length=16, choices=Category.choices)
    amount       = models.DecimalField(max_digits=12, decimal_places=2,
                                       validators=[MinValueValidator(Decimal("0.01"))])
    description  = models.CharField(max_length=255, blank=True)
    expense_date = models.DateField(default=timezone.localdate)
    recorded_by  = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    created_at   = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-expense_date", "-created_at"]
        indexes  = [models.Index(fields=["category", "expense_date"], name="expense_cat_date_idx")]

    def __str__(self):
        return f"{self.category} {self.amount}"


class ManufacturerWallet(models.Model):
    """Money prepaid to a supplier for one cement type, drawn down by purchases."""
    id          = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    supplier    = models.ForeignKey("orders.Supplier", on_delete=models.PROTECT, related_name="wallets")
    cement_type = models.CharField(max_length=80)
    unit        = models.CharField(max_length=4, choices=Order.Unit.choices, default=Order.Unit.BAGS)
    balance     = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    created_at  = models.DateTimeField(auto_now_add=True)
    updated_at  = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["supplier", "cement_type"], name="uniq_wallet_supplier_cement"),
        ]

    def __str__(self):
        return f"{self.supplier} / {self.cement_type}: {self.balance}"


class WalletTransaction(models.Model):

    class Type(models.TextChoices):
        DEPOSIT    = "deposit",    "Deposit"
        WITHDRAWAL = "withdrawal", "Withdrawal"
        ADJUSTMENT = "adjustment", "Adjustment"

    id          = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    wallet      = models.ForeignKey(ManufacturerWallet, on_delete=models.PROTECT, related_name="transactions")
    type        = models.CharField(max_length=10, choices=Type.choices)
    amount      = models.DecimalField(max_digits=14, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    order       = models.ForeignKey(Order, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name="wallet_transactions")
    created_at  = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]


class SupplierPayment(models.Model):
    """Money paid to a cement manufacturer; prepayments top up the wallet."""

    class PaymentType(models.TextChoices):
        PREPAYMENT  = "prepayment",  "Prepayment"
        POSTPAYMENT = "postpayment", "Postpayment"

    id             = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    supplier       = models.ForeignKey("orders.Supplier", on_delete=models.PROTECT, related_name="payments")
    wallet         = models.ForeignKey(ManufacturerWallet, on_delete=models.SET_NULL, null=True, blank=True,
                                       related_name="supplier_payments")
    payment_type   = models.CharField(max_length=11, choices=PaymentType.choices, default=PaymentType.PREPAYMENT)
    cement_type    = models.CharField(max_length=80, blank=True)
    amount         = models.DecimalField(max_digits=14, decimal_places=2,
                                         validators=[MinValueValidator(Decimal("0.01"))])
    payment_date   = models.DateField(default=timezone.localdate)
    reference      = models.CharField(max_length=80, blank=True)
    period_covered = models.CharField(max_length=60, blank=True)
    method         = models.CharField(max_length=8, choices=Payment.Method.choices, default=Payment.Method.TRANSFER)
    notes          = models.TextField(blank=True)
    created_at     = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-payment_date", "-created_at"]


class Purchase(models.Model):
    """Supplier-side procurement: the cost stream of dual-stream accounting."""

    class Status(models.TextChoices):
        ORDERED   = "ordered",   "Ordered"
        RECEIVED  = "received",  "Received"
        CANCELLED = "cancelled", "Cancelled"

    id                 = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase_number    = models.CharField(max_length=20, unique=True)
    supplier           = models.ForeignKey("orders.Supplier", on_delete=models.PROTECT, related_name="purchases")
    cement_type        = models.CharField(max_length=80)
    quantity           = models.DecimalField(max_digits=12, decimal_places=2,
                                             validators=[MinValueValidator(Decimal("0.01"))])
    unit               = models.CharField(max_length=4, choices=Order.Unit.choices, default=Order.Unit.BAGS)
    cost_per_unit      = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total_cost         = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    destination_depot  = models.ForeignKey("orders.Depot", on_delete=models.SET_NULL, null=True, blank=True,
                                           related_name="purchases")
    sales_order        = models.ForeignKey(Order, on_delete=models.SET_NULL, null=True, blank=True,
                                           related_name="purchases")
    is_direct_delivery = models.BooleanField(default=False)
    wallet             = models.ForeignKey(ManufacturerWallet, on_delete=models.SET_NULL, null=True, blank=True,
                                           related_name="purchases")
    atc_number         = models.CharField(max_length=40, blank=True)
    cap_number         = models.CharField(max_length=40, blank=True)
    status             = models.CharField(max_length=9, choices=Status.choices, default=Status.ORDERED)
    purchase_date      = models.DateField(default=timezone.localdate)
    notes              = models.TextField(blank=True)
    created_at         = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-purchase_date", "-created_at"]
        indexes  = [models.Index(fields=["status"], name="purchase_status_idx")]

    def __str__(self):
        return f"{self.purchase_number} [{self.status}]"

    def save(self, *args, **kwargs):
        self.total_cost = Decimal(str(self.cost_per_unit)) * Decimal(str(self.quantity))
        super().save(*args, **kwargs)
