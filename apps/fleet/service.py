"""
Fleet services.

FleetAvailabilityResolver — which truck+driver pairs may take a new dispatch.
DriverWalletService       — append-only driver ledger; balance is always a fold.

Busy-ness comes from active FleetReservation rows (indexed, one per truck)
rather than from scanning every in-flight order.
"""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import Case, DecimalField, F, Sum, When
from django.utils import timezone

from apps.fleet.models import ComplianceDocument, Driver, DriverTransaction, FleetReservation, Truck
from apps.orders.exceptions import ConflictError, PreconditionError, ValidationError

logger = logging.getLogger("cementops.fleet")


class FleetAvailabilityResolver:
    """
    A truck is eligible iff it has a paired driver, truck and driver are both
    active with no expired compliance document, and neither the truck nor the
    driver holds an active reservation. Expired means expiry_date <= today.
    Results are ordered by plate number so the dispatch dialog is deterministic.
    """

    def __init__(self, today=None):
        self._today = today

    @property
    def today(self):
        return self._today or timezone.localdate()

    # ── Sets ──────────────────────────────────────────────────────────────────
    def busy_truck_ids(self) -> set:
        return set(
            FleetReservation.objects.filter(released_at__isnull=True).values_list("truck_id", flat=True)
        )

    def busy_driver_ids(self) -> set:
        return set(
            FleetReservation.objects.filter(released_at__isnull=True).values_list("driver_id", flat=True)
        )

    def expired_entity_ids(self, entity_type: str) -> set:
        return set(
            ComplianceDocument.objects
            .filter(entity_type=entity_type, expiry_date__lte=self.today)
            .values_list("entity_id", flat=True)
        )

    def available_units(self):
        """List of eligible trucks with their paired driver pre-loaded."""
        expired_trucks  = self.expired_entity_ids(ComplianceDocument.EntityType.TRUCK)
        expired_drivers = self.expired_entity_ids(ComplianceDocument.EntityType.DRIVER)
        busy            = self.busy_truck_ids()
        busy_drivers    = self.busy_driver_ids()

        trucks = (
            Truck.objects
            .select_related("driver")
            .filter(is_active=True, driver__isnull=False, driver__is_active=True)
            .order_by("plate_number")
        )
        return [
            t for t in trucks
            if t.id not in expired_trucks
            and t.driver_id not in expired_drivers
            and t.id not in busy
            and t.driver_id not in busy_drivers
        ]

    # ── Pair validation ───────────────────────────────────────────────────────
    def validate_pair(self, truck: Truck, driver: Driver, order=None):
        """
        Raise PreconditionError naming the first failed rule. ``order`` lets an
        order keep passing while it already holds the truck (re-validation).
        """
        if truck.driver_id is None:
            raise PreconditionError(f"Truck {truck.plate_number} has no assigned driver.", code="truck_no_driver")
        if truck.driver_id != driver.id:
            raise PreconditionError(
                f"Driver {driver.name} is not paired with truck {truck.plate_number}.",
                code="driver_not_paired",
            )
        if not truck.is_active:
            raise PreconditionError(f"Truck {truck.plate_number} is inactive.", code="truck_inactive")
        if not driver.is_active:
            raise PreconditionError(f"Driver {driver.name} is inactive.", code="driver_inactive")
        if truck.id in self.expired_entity_ids(ComplianceDocument.EntityType.TRUCK):
            raise PreconditionError(
                f"Truck {truck.plate_number} has expired compliance documents.", code="truck_documents_expired"
            )
        if driver.id in self.expired_entity_ids(ComplianceDocument.EntityType.DRIVER):
            raise PreconditionError(
                f"Driver {driver.name} has expired compliance documents.", code="driver_documents_expired"
            )
        holder = (
            FleetReservation.objects
            .filter(truck=truck, released_at__isnull=True)
            .values_list("order_id", flat=True)
            .first()
        )
        if holder is not None and (order is None or holder != order.id):
            raise PreconditionError(f"Truck {truck.plate_number} is busy on another order.", code="truck_busy")
        driver_holder = (
            FleetReservation.objects
            .filter(driver=driver, released_at__isnull=True)
            .values_list("order_id", flat=True)
            .first()
        )
        if driver_holder is not None and (order is None or driver_holder != order.id):
            raise PreconditionError(f"Driver {driver.name} is on another trip.", code="driver_busy")

    # ── Reservation ledger ────────────────────────────────────────────────────
    def reserve(self, truck: Truck, driver: Driver, order) -> FleetReservation:
        """
        Insert the active reservation. Must run inside the caller's atomic block;
        a savepoint keeps the outer transaction usable if the constraint fires.
        """
        try:
            with transaction.atomic():
                reservation = FleetReservation.objects.create(truck=truck, driver=driver, order=order)
        except IntegrityError as exc:
            logger.warning("Reservation conflict for truck %s on %s: %s",
                           truck.plate_number, order.order_number, exc)
            raise ConflictError(
                f"Truck {truck.plate_number} was just assigned to another order. Refresh and retry.",
                code="fleet_conflict",
            ) from exc
        logger.info("Truck %s reserved for %s", truck.plate_number, order.order_number)
        return reservation

    def release(self, order, reason: str) -> int:
        released = (
            FleetReservation.objects
            .filter(order=order, released_at__isnull=True)
            .update(released_at=timezone.now(), release_reason=reason)
        )
        if released:
            logger.info("Released %d reservation(s) for %s (%s)", released, order.order_number, reason)
        return released


class DriverWalletService:
    """Driver ledger. There is no cached balance column; every read folds the rows."""

    @staticmethod
    def balance_expression():
        signed = Case(
            When(type__in=DriverTransaction.DEBIT_TYPES, then=-F("amount")),
            default=F("amount"),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
        return Sum(signed)

    def balance(self, driver) -> Decimal:
        driver_id = getattr(driver, "id", driver)
        total = (
            DriverTransaction.objects
            .filter(driver_id=driver_id)
            .aggregate(balance=self.balance_expression())["balance"]
        )
        return total or Decimal("0")

    def summary(self, driver) -> dict:
        rows = DriverTransaction.objects.filter(driver=driver)
        credits = rows.exclude(type__in=DriverTransaction.DEBIT_TYPES).aggregate(t=Sum("amount"))["t"] or Decimal("0")
        debits  = rows.filter(type__in=DriverTransaction.DEBIT_TYPES).aggregate(t=Sum("amount"))["t"] or Decimal("0")
        return {
            "driver_id":     str(driver.id),
            "total_credits": credits,
            "total_debits":  debits,
            "balance":       credits - debits,
        }

    def record_transaction(self, driver, type, amount, order=None, description="", actor=None) -> DriverTransaction:
        """Append one ledger line; amount is always positive, the type carries the sign."""
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValidationError("Transaction amount must be greater than zero.", code="invalid_amount")
        if type not in DriverTransaction.Type.values:
            raise ValidationError(f"Unknown transaction type '{type}'.", code="invalid_type")
        if not isinstance(driver, Driver):
            driver = Driver.objects.filter(pk=driver).first()
            if driver is None:
                raise ValidationError("Driver not found.", code="driver_not_found")

        tx = DriverTransaction.objects.create(
            driver=driver, order=order, type=type, amount=amount,
            description=description, created_by=actor,
        )
        logger.info("Driver %s wallet %s %s%s", driver.name, type, amount,
                    f" (order {order.order_number})" if order else "")
        return tx


def record_driver_wallet_transaction(driver_id, type, amount, order_id=None, description="", actor=None):
    """Functional entrypoint mirroring the financial collaborator contract."""
    from apps.orders.models import Order

    order = None
    if order_id:
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            raise ValidationError("Order not found.", code="order_not_found")
    return DriverWalletService().record_transaction(
        driver_id, type, amount, order=order, description=description, actor=actor,
    )
