"""
Order models — one haulage + cement-trading transaction per Order.

Status pipeline: requested → (in_gate → loaded →) dispatched → delivered.
The active pipeline skips in_gate/loaded; delivered is only reachable
through the Reconciliation Engine, never by a plain status write.
"""

import uuid
from decimal import Decimal, ROUND_HALF_UP
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

TWO_PLACES = Decimal("0.01")


def _dec(value) -> Decimal:
    return Decimal(str(value)) if value not in (None, "") else Decimal("0")


class Depot(models.Model):
    id           = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name         = models.CharField(max_length=120, unique=True)
    address      = models.TextField(blank=True)
    manager_name = models.CharField(max_length=120, blank=True)
    is_active    = models.BooleanField(default=True)
    created_at   = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Supplier(models.Model):
    """Cement manufacturer / plant the business buys from."""
    id             = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name           = models.CharField(max_length=160, unique=True)
    contact_person = models.CharField(max_length=120, blank=True)
    phone          = models.CharField(max_length=20, blank=True)
    email          = models.EmailField(blank=True)
    address        = models.TextField(blank=True)
    is_active      = models.BooleanField(default=True)
    created_at     = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Order(models.Model):

    class OrderType(models.TextChoices):
        PLANT_DIRECT   = "plant_direct",   "Plant Direct"
        DEPOT_DISPATCH = "depot_dispatch", "Depot Dispatch"

    class Unit(models.TextChoices):
        TONS = "tons", "Tons"
        BAGS = "bags", "Bags"

    class Status(models.TextChoices):
        REQUESTED  = "requested",  "Requested"
        IN_GATE    = "in_gate",    "In Gate"
        LOADED     = "loaded",     "Loaded"
        DISPATCHED = "dispatched", "Dispatched"
        DELIVERED  = "delivered",  "Delivered"

    class PaymentStatus(models.TextChoices):
        PENDING   = "Pending",   "Pending"
        PARTIAL   = "Partial",   "Partial"
        CONFIRMED = "Confirmed", "Confirmed"

    PIPELINE        = [Status.REQUESTED, Status.IN_GATE, Status.LOADED, Status.DISPATCHED, Status.DELIVERED]
    ACTIVE_PIPELINE = [Status.REQUESTED, Status.DISPATCHED, Status.DELIVERED]
    PRE_DISPATCH    = (Status.REQUESTED, Status.IN_GATE, Status.LOADED)
    DERIVED_FIELDS  = (
        "total_cement_purchase", "total_cement_sale", "cement_profit",
        "cement_margin_percent", "total_amount", "total_trip_cost",
    )

    id              = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number    = models.CharField(max_length=20, unique=True, db_index=True)
    order_type      = models.CharField(max_length=14, choices=OrderType.choices, default=OrderType.DEPOT_DISPATCH)
    cement_type     = models.CharField(max_length=80)
    quantity        = models.DecimalField(max_digits=12, decimal_places=2,
                                          validators=[MinValueValidator(Decimal("0.01"))])
    unit            = models.CharField(max_length=4, choices=Unit.choices, default=Unit.BAGS)
    status          = models.CharField(max_length=10, choices=Status.choices, default=Status.REQUESTED)

    customer        = models.ForeignKey("customers.Customer", on_delete=models.PROTECT, related_name="orders")
    depot           = models.ForeignKey(Depot, on_delete=models.PROTECT,
                                        null=True, blank=True, related_name="orders")
    supplier        = models.ForeignKey(Supplier, on_delete=models.PROTECT,
                                        null=True, blank=True, related_name="orders")
    truck           = models.ForeignKey("fleet.Truck", on_delete=models.SET_NULL,
                                        null=True, blank=True, related_name="orders")
    driver          = models.ForeignKey("fleet.Driver", on_delete=models.SET_NULL,
                                        null=True, blank=True, related_name="orders")

    # Dual-stream pricing: cement trading
    cement_purchase_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    cement_sale_price     = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total_cement_purchase = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    total_cement_sale     = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    cement_profit         = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    cement_margin_percent = models.DecimalField(max_digits=7,  decimal_places=2, default=Decimal("0"))
    total_amount          = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    # Dual-stream pricing: haulage
    fuel_cost        = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    driver_allowance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    other_trip_costs = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total_trip_cost  = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    payment_status  = models.CharField(max_length=9, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    payment_terms   = models.CharField(max_length=60, blank=True)

    # Delivery and regulatory identifiers
    delivery_otp            = models.CharField(max_length=6, blank=True)
    delivery_address        = models.TextField(blank=True)
    waybill_number          = models.CharField(max_length=40, blank=True)
    waybill_url             = models.URLField(blank=True)
    gate_pass_number        = models.CharField(max_length=20, blank=True)
    loading_manifest_number = models.CharField(max_length=20, blank=True)
    atc_number              = models.CharField(max_length=40, blank=True)
    cap_number              = models.CharField(max_length=40, blank=True)
    is_direct_drop          = models.BooleanField(default=False)

    notes           = models.TextField(blank=True)
    created_by      = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                        null=True, blank=True, related_name="created_orders")
    created_at      = models.DateTimeField(auto_now_add=True)
    updated_at      = models.DateTimeField(auto_now=True)
    dispatched_at   = models.DateTimeField(null=True, blank=True)
    delivered_at    = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [
            models.Index(fields=["status"],             name="order_status_idx"),
            models.Index(fields=["customer", "status"], name="order_customer_status_idx"),
            models.Index(fields=["truck", "status"],    name="order_truck_status_idx"),
            models.Index(fields=["created_at"],         name="order_created_idx"),
        ]

    def __str__(self):
        return f"{self.order_number} [{self.status}]"

    def save(self, *args, **kwargs):
        self.recompute_totals()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | set(self.DERIVED_FIELDS)
        super().save(*args, **kwargs)

    def recompute_totals(self):
        qty = _dec(self.quantity)
        self.cement_purchase_price = _dec(self.cement_purchase_price)
        self.cement_sale_price     = _dec(self.cement_sale_price)
        self.total_amount          = _dec(self.total_amount)
        self.total_cement_purchase = (self.cement_purchase_price * qty).quantize(TWO_PLACES, ROUND_HALF_UP)
        self.total_cement_sale     = (self.cement_sale_price * qty).quantize(TWO_PLACES, ROUND_HALF_UP)
        self.cement_profit         = self.total_cement_sale - self.total_cement_purchase
        if self.total_cement_sale:
            self.cement_margin_percent = (
                self.cement_profit / self.total_cement_sale * 100
            ).quantize(TWO_PLACES, ROUND_HALF_UP)
        else:
            self.cement_margin_percent = Decimal("0")
        if not self.total_amount:
            self.total_amount = self.total_cement_sale
        self.total_trip_cost = _dec(self.fuel_cost) + _dec(self.driver_allowance) + _dec(self.other_trip_costs)

    @property
    def unit_price(self) -> Decimal:
        """Sale price per unit, used to value shortages and credit notes."""
        if self.cement_sale_price:
            return self.cement_sale_price
        if self.quantity:
            return (self.total_amount / self.quantity).quantize(TWO_PLACES, ROUND_HALF_UP)
        return Decimal("0")

    @property
    def stage_index(self) -> int:
        return self.PIPELINE.index(self.status)


class Inventory(models.Model):
    """
    Depot stock and price list for one cement type in one unit.
    Depot dispatches draw the order quantity down; nothing else moves it
    except a catalog edit.
    """
    id                = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    depot             = models.ForeignKey(Depot, on_delete=models.CASCADE, related_name="inventory")
    cement_type       = models.CharField(max_length=80)
    unit              = models.CharField(max_length=4, choices=Order.Unit.choices, default=Order.Unit.BAGS)
    quantity          = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"),
                                            validators=[MinValueValidator(Decimal("0"))])
    cost_price_ton    = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    selling_price_ton = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    cost_price_bag    = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    selling_price_bag = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    created_at        = models.DateTimeField(auto_now_add=True)
    last_updated      = models.DateTimeField(auto_now=True)

    class Meta:
        ordering    = ["depot__name", "cement_type"]
        constraints = [
            models.UniqueConstraint(fields=["depot", "cement_type", "unit"], name="uniq_inventory_depot_cement_unit"),
        ]

    def __str__(self):
        return f"{self.depot} / {self.cement_type}: {self.quantity} {self.unit}"


class OrderEvent(models.Model):
    """Immutable audit trail for every status transition and lifecycle action."""
    order       = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="events")
    from_status = models.CharField(max_length=10)
    to_status   = models.CharField(max_length=10)
    actor       = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    note        = models.CharField(max_length=255, blank=True)
    occurred_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["occurred_at"]


class Shortage(models.Model):
    """
    Reconciliation outcome, one per delivered order. The OneToOne on order is
    the idempotence guard against a second reconciliation.
    """

    class Liability(models.TextChoices):
        DRIVER  = "driver",  "Driver"
        COMPANY = "company", "Company"

    class Status(models.TextChoices):
        PENDING  = "pending",  "Pending"
        APPROVED = "approved", "Approved"
        DEDUCTED = "deducted", "Deducted"

    id                  = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order               = models.OneToOneField(Order, on_delete=models.PROTECT, related_name="shortage")
    truck               = models.ForeignKey("fleet.Truck",  on_delete=models.SET_NULL, null=True, blank=True)
    driver              = models.ForeignKey("fleet.Driver", on_delete=models.SET_NULL, null=True, blank=True,
                                            related_name="shortages")
    dispatched_quantity = models.DecimalField(max_digits=12, decimal_places=2)
    received_quantity   = models.DecimalField(max_digits=12, decimal_places=2)
    missing_quantity    = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    damaged_quantity    = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    shortage_quantity   = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    unit                = models.CharField(max_length=4, choices=Order.Unit.choices)
    liability           = models.CharField(max_length=7, choices=Liability.choices, default=Liability.COMPANY)
    deduction_amount    = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    reason              = models.TextField(blank=True)
    status              = models.CharField(max_length=8, choices=Status.choices, default=Status.PENDING)
    reconciled_by       = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                            null=True, blank=True)
    created_at          = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [models.Index(fields=["status"], name="shortage_status_idx")]

    def __str__(self):
        return f"{self.order.order_number}: short {self.shortage_quantity} ({self.liability})"


class CreditNote(models.Model):
    """Credit issued to the customer for short or damaged delivery."""

    class Status(models.TextChoices):
        ISSUED  = "issued",  "Issued"
        APPLIED = "applied", "Applied to balance"
        VOID    = "void",    "Void"

    id         = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer   = models.ForeignKey("customers.Customer", on_delete=models.PROTECT, related_name="credit_notes")
    order      = models.ForeignKey(Order, on_delete=models.PROTECT, null=True, blank=True,
                                   related_name="credit_notes")
    amount     = models.DecimalField(max_digits=14, decimal_places=2)
    quantity   = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    unit       = models.CharField(max_length=4, choices=Order.Unit.choices, default=Order.Unit.BAGS)
    reason     = models.TextField(blank=True)
    status     = models.CharField(max_length=7, choices=Status.choices, default=Status.ISSUED)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"CN {self.customer} {self.amount}"
