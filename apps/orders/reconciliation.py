"""
ReconciliationEngine — the only path from dispatched to delivered.

The driver reads the customer's OTP at the drop site; the dispatcher enters
it with the counted quantities. Everything is validated before the first
write, so a rejected submission leaves the order dispatched and untouched.
"""

import hmac
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.shortcuts import get_object_or_404
from django.utils import timezone

from apps.finance.service import adjust_customer_balance
from apps.fleet.models import Driver, DriverTransaction, FleetReservation
from apps.fleet.service import DriverWalletService, FleetAvailabilityResolver
from apps.orders.exceptions import AuthorizationError, ConflictError, PreconditionError, ValidationError
from apps.orders.models import TWO_PLACES, CreditNote, Order, OrderEvent, Shortage

logger = logging.getLogger("cementops.reconciliation")


def _qty(value, label) -> Decimal:
    try:
        qty = Decimal(str(value if value not in (None, "") else 0))
    except ArithmeticError:
        raise ValidationError(f"{label} must be a number.", code="invalid_quantity")
    if qty < 0:
        raise ValidationError(f"{label} cannot be negative.", code="quantity_mismatch")
    return qty


class ReconciliationEngine:

    def __init__(self, fleet_resolver=None, wallet_service=None):
        self.resolver = fleet_resolver or FleetAvailabilityResolver()
        self.wallet   = wallet_service or DriverWalletService()

    @transaction.atomic
    def submit(self, order_id, otp, qty_good, qty_missing=0, qty_damaged=0,
               reason=None, liability=None, deduction_amount=None, actor=None) -> Shortage:
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)

        # 1. Quantities balance against what left the gate
        good    = _qty(qty_good, "Good quantity")
        missing = _qty(qty_missing, "Missing quantity")
        damaged = _qty(qty_damaged, "Damaged quantity")
        tolerance = Decimal(str(getattr(settings, "RECONCILIATION_TOLERANCE", "0.01")))
        if abs(good + missing + damaged - order.quantity) >= tolerance:
            raise ValidationError(
                f"Good + missing + damaged ({good + missing + damaged}) must equal the "
                f"dispatched quantity ({order.quantity} {order.unit}).",
                code="quantity_mismatch",
            )

        # 2. State
        if order.status == Order.Status.DELIVERED:
            raise ConflictError(f"Order {order.order_number} is already reconciled.", code="already_reconciled")
        if order.status != Order.Status.DISPATCHED:
            raise PreconditionError(
                f"Order {order.order_number} is {order.status}; only dispatched orders can be reconciled.",
                code="not_dispatched",
            )

        # 3. Proof of delivery
        otp = str(otp or "").strip()
        if not otp or not order.delivery_otp or not hmac.compare_digest(otp, order.delivery_otp):
            logger.warning("OTP mismatch on %s", order.order_number)
            raise AuthorizationError("Invalid OTP. Delivery cannot be confirmed.", code="otp_mismatch")

        # 4. Shortage terms
        short = missing + damaged
        liability = liability or (Shortage.Liability.DRIVER if short > 0 else Shortage.Liability.COMPANY)
        if liability not in Shortage.Liability.values:
            raise ValidationError(f"Unknown liability '{liability}'.", code="invalid_liability")
        reason = (reason or "").strip()
        if short > 0 and not reason:
            raise ValidationError("A reason is required when goods are missing or damaged.", code="reason_required")

        short_value = (short * order.unit_price).quantize(TWO_PLACES, ROUND_HALF_UP)
        if deduction_amount in (None, ""):
            deduction = short_value if liability == Shortage.Liability.DRIVER else Decimal("0")
        else:
            deduction = _qty(deduction_amount, "Deduction amount")
        if short == 0:
            liability = Shortage.Liability.COMPANY   # nothing short, nothing to charge
        if liability == Shortage.Liability.COMPANY:
            deduction = Decimal("0")

        if liability == Shortage.Liability.DRIVER and deduction > 0:
            shortage_status = Shortage.Status.DEDUCTED
        elif liability == Shortage.Liability.DRIVER and short > 0:
            shortage_status = Shortage.Status.PENDING
        else:
            shortage_status = Shortage.Status.APPROVED

        # ── Effects ──────────────────────────────────────────────────────────
        try:
            with transaction.atomic():
                shortage = Shortage.objects.create(
                    order=order, truck_id=order.truck_id, driver_id=order.driver_id,
                    dispatched_quantity=order.quantity, received_quantity=good,
                    missing_quantity=missing, damaged_quantity=damaged, shortage_quantity=short,
                    unit=order.unit, liability=liability, deduction_amount=deduction,
                    reason=reason, status=shortage_status, reconciled_by=actor,
                )
        except IntegrityError as exc:
            raise ConflictError(f"Order {order.order_number} is already reconciled.",
                                code="already_reconciled") from exc

        if shortage_status == Shortage.Status.DEDUCTED and order.driver_id:
            self.wallet.record_transaction(
                order.driver, DriverTransaction.Type.SHORTAGE_DEDUCTION, deduction, order=order,
                description=f"Shortage on {order.order_number}: {short} {order.unit}", actor=actor,
            )

        if short > 0 and short_value > 0:
            CreditNote.objects.create(
                customer_id=order.customer_id, order=order, amount=short_value,
                quantity=short, unit=order.unit, status=CreditNote.Status.APPLIED,
                reason=f"Short delivery on {order.order_number}: {reason}",
            )
            adjust_customer_balance(order.customer_id, -short_value)

        self.resolver.release(order, FleetReservation.ReleaseReason.DELIVERED)
        if order.driver_id:
            Driver.objects.filter(pk=order.driver_id).update(
                total_trips=F("total_trips") + 1,
                total_delivered=F("total_delivered") + good,
            )

        order.status       = Order.Status.DELIVERED
        order.delivered_at = timezone.now()
        order.save(update_fields=["status", "delivered_at", "updated_at"])
        OrderEvent.objects.create(
            order=order, from_status=Order.Status.DISPATCHED, to_status=Order.Status.DELIVERED,
            actor=actor, note=f"Reconciled: {good} good, {missing} missing, {damaged} damaged",
        )
        logger.info("Order %s delivered; short %s %s (%s, deduction %s)",
                    order.order_number, short, order.unit, liability, deduction)
        return shortage
