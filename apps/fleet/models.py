"""
Fleet models — trucks, drivers, compliance documents, driver wallet ledger
and explicit truck reservations.

A truck and its paired driver are dispatched as one unit. FleetReservation
is the allocation ledger: at most one active row per truck, driver and order,
enforced by partial unique constraints so two concurrent dispatches cannot
both hold the same truck.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.db.models import Q
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils import timezone


class Driver(models.Model):
    id                 = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name               = models.CharField(max_length=120)
    phone              = models.CharField(max_length=20, blank=True)
    license_number     = models.CharField(max_length=40, blank=True)
    standard_allowance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"),
                                             validators=[MinValueValidator(0)])
    is_active          = models.BooleanField(default=True)
    total_trips        = models.PositiveIntegerField(default=0)
    total_delivered    = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    created_at         = models.DateTimeField(auto_now_add=True)
    updated_at         = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes  = [models.Index(fields=["is_active"], name="driver_active_idx")]

    def __str__(self):
        return self.name


class Truck(models.Model):
    id                = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    plate_number      = models.CharField(max_length=20, unique=True)
    model             = models.CharField(max_length=80, blank=True)
    truck_type        = models.CharField(max_length=40, blank=True)
    capacity_tons     = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    default_fuel_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"),
                                            validators=[MinValueValidator(0)])
    driver            = models.OneToOneField(Driver, on_delete=models.SET_NULL,
                                             null=True, blank=True, related_name="truck")
    is_active         = models.BooleanField(default=True)
    created_at        = models.DateTimeField(auto_now_add=True)
    updated_at        = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["plate_number"]
        indexes  = [models.Index(fields=["is_active"], name="truck_active_idx")]

    def __str__(self):
        return self.plate_number


class ComplianceDocument(models.Model):
    """Licence / permit attached to a truck or a driver; eligibility checks the expiry."""

    class EntityType(models.TextChoices):
        TRUCK  = "truck",  "Truck"
        DRIVER = "driver", "Driver"

    class DocumentType(models.TextChoices):
        LICENSE              = "license",              "Driver's Licence"
        INSURANCE            = "insurance",            "Insurance"
        ROAD_WORTHINESS      = "road_worthiness",      "Road Worthiness"
        HACKNEY_PERMIT       = "hackney_permit",       "Hackney Permit"
        HEAVY_DUTY_PERMIT    = "heavy_duty_permit",    "Heavy Duty Permit"
        VEHICLE_REGISTRATION = "vehicle_registration", "Vehicle Registration"

    id              = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    entity_type     = models.CharField(max_length=6, choices=EntityType.choices)
    entity_id       = models.UUIDField()
    document_type   = models.CharField(max_length=24, choices=DocumentType.choices)
    document_number = models.CharField(max_length=60, blank=True)
    issue_date      = models.DateField(null=True, blank=True)
    expiry_date     = models.DateField()
    notes           = models.CharField(max_length=255, blank=True)
    created_at      = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["expiry_date"]
        indexes  = [
            models.Index(fields=["entity_type", "entity_id"], name="doc_entity_idx"),
            models.Index(fields=["expiry_date"],              name="doc_expiry_idx"),
        ]

    def __str__(self):
        return f"{self.document_type} ({self.entity_type}) → {self.expiry_date}"

    def is_expired(self, today=None) -> bool:
        return self.expiry_date <= (today or timezone.localdate())


class DriverTransaction(models.Model):
    """Append-only line in a driver's wallet. The balance is a fold over these rows."""

    class Type(models.TextChoices):
        SHORTAGE_DEDUCTION = "shortage_deduction", "Shortage Deduction"
        ALLOWANCE          = "allowance",          "Allowance"
        SALARY_PAYMENT     = "salary_payment",     "Salary Payment"
        BONUS              = "bonus",              "Bonus"
        DEPOSIT            = "deposit",            "Deposit"
        OTHER              = "other",              "Other Credit"

    DEBIT_TYPES = (Type.SHORTAGE_DEDUCTION,)

    id               = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    driver           = models.ForeignKey(Driver, on_delete=models.PROTECT, related_name="transactions")
    order            = models.ForeignKey("orders.Order", on_delete=models.PROTECT,
                                         null=True, blank=True, related_name="driver_transactions")
    type             = models.CharField(max_length=20, choices=Type.choices)
    amount           = models.DecimalField(max_digits=12, decimal_places=2,
                                           validators=[MinValueValidator(Decimal("0.01"))])
    description      = models.CharField(max_length=255, blank=True)
    transaction_date = models.DateField(default=timezone.localdate)
    created_by       = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                         null=True, blank=True)
    created_at       = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-transaction_date", "-created_at"]
        indexes  = [models.Index(fields=["driver", "transaction_date"], name="drvtx_driver_date_idx")]
        constraints = [
            models.UniqueConstraint(
                fields=["order"],
                condition=Q(type="shortage_deduction"),
                name="uniq_shortage_deduction_per_order",
            ),
        ]

    def __str__(self):
        return f"{self.driver} {self.type} {self.amount}"

    @property
    def is_debit(self) -> bool:
        return self.type in self.DEBIT_TYPES


class FleetReservation(models.Model):
    """Truck + driver held by an in-flight order until delivery or re-assignment."""

    class ReleaseReason(models.TextChoices):
        DELIVERED  = "delivered",  "Delivered"
        REASSIGNED = "reassigned", "Re-assigned"
        CANCELLED  = "cancelled",  "Order cancelled / deleted"

    truck          = models.ForeignKey(Truck,  on_delete=models.PROTECT, related_name="reservations")
    driver         = models.ForeignKey(Driver, on_delete=models.PROTECT, related_name="reservations")
    order          = models.ForeignKey("orders.Order", on_delete=models.PROTECT, related_name="reservations")
    acquired_at    = models.DateTimeField(default=timezone.now)
    released_at    = models.DateTimeField(null=True, blank=True)
    release_reason = models.CharField(max_length=12, choices=ReleaseReason.choices, blank=True)

    class Meta:
        ordering = ["-acquired_at"]
        constraints = [
            models.UniqueConstraint(fields=["truck"],  condition=Q(released_at__isnull=True),
                                    name="uniq_active_reservation_truck"),
            models.UniqueConstraint(fields=["driver"], condition=Q(released_at__isnull=True),
                                    name="uniq_active_reservation_driver"),
            models.UniqueConstraint(fields=["order"],  condition=Q(released_at__isnull=True),
                                    name="uniq_active_reservation_order"),
        ]

    def __str__(self):
        state = "active" if self.released_at is None else f"released ({self.release_reason})"
        return f"{self.truck} → {self.order_id} [{state}]"
