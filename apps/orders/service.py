"""
OrderLifecycleController — the central orchestrator.

Flow:  create_order  →  dispatch (clearance + fleet reservation + OTP)  →  reconcile
                                                                             ↑
                                                               (apps.orders.reconciliation)

Every mutating step runs in one transaction with the order row locked, so a
rejected precondition leaves nothing behind and two dispatchers racing for the
same truck end with exactly one reservation.
"""

import logging
import math
import random
import string
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, F, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone

from apps.customers.models import Customer
from apps.finance.models import Expense, Payment, Purchase
from apps.finance.service import adjust_customer_balance, is_financially_cleared
from apps.fleet.models import Driver, DriverTransaction, FleetReservation, Truck
from apps.fleet.service import FleetAvailabilityResolver
from apps.orders.exceptions import ConflictError, PreconditionError, ValidationError
from apps.orders.models import CreditNote, Inventory, Order, OrderEvent, Shortage

logger = logging.getLogger("cementops.orders")

_otp_rng = random.SystemRandom()

PRICING_FIELDS = ("quantity", "cement_sale_price", "cement_purchase_price")
MONEY_FIELDS   = PRICING_FIELDS + ("total_amount",)
PROTECTED_FIELDS = (
    "status", "truck", "driver", "delivery_otp", "order_number",
    "dispatched_at", "delivered_at", "payment_status",
)
# Fixed once the receivable is posted and the stock has left the depot
DISPATCH_LOCKED_FIELDS = ("customer", "order_type", "depot", "cement_type", "unit")


def _generate_order_number():
    chars = string.ascii_uppercase + string.digits
    suffix = "".join(random.choices(chars, k=8))
    return f"ORD-{suffix}"


def _generate_document_number(prefix: str) -> str:
    """GP-/LM- numbers: date plus a 4-digit random suffix."""
    date_str = timezone.localdate().strftime("%Y%m%d")
    return f"{prefix}-{date_str}-{random.randrange(10000):04d}"


def generate_otp() -> str:
    return str(math.floor(100000 + _otp_rng.random() * 900000))


def _validate_source(order_type, depot, supplier):
    if order_type == Order.OrderType.DEPOT_DISPATCH and not depot:
        raise ValidationError("Product Source is required: select a depot.", code="depot_required")
    if order_type == Order.OrderType.PLANT_DIRECT and not (supplier or depot):
        raise ValidationError("Product Source is required: select a supplier.", code="source_required")


class OrderLifecycleController:
    """
    Owns every legal status transition of an Order.
    Dependencies are injected so they can be swapped in tests.
    """

    def __init__(self, fleet_resolver=None, otp_notifier=None):
        self.resolver = fleet_resolver or FleetAvailabilityResolver()
        self.otp_notifier = otp_notifier

    # ── Create ────────────────────────────────────────────────────────────────
    @transaction.atomic
    def create_order(self, data: dict, actor=None) -> Order:
        data = dict(data)
        transport_cost = Decimal(str(data.pop("transport_cost", None) or 0))

        customer = data.get("customer")
        if customer is None:
            raise ValidationError("Customer is required.", code="customer_required")
        order_type = data.setdefault("order_type", Order.OrderType.DEPOT_DISPATCH)
        _validate_source(order_type, data.get("depot"), data.get("supplier"))
        if customer.is_blocked:
            raise PreconditionError(f"Customer {customer.name} is blocked.", code="customer_blocked")
        for field in PROTECTED_FIELDS:
            data.pop(field, None)

        order_number = _generate_order_number()
        while Order.objects.filter(order_number=order_number).exists():
            order_number = _generate_order_number()

        order = Order.objects.create(order_number=order_number, created_by=actor, **data)

        if transport_cost > 0:
            Expense.objects.create(
                order=order, category=Expense.Category.TRANSPORT, amount=transport_cost,
                description=f"Transport cost for {order.order_number}", recorded_by=actor,
            )

        OrderEvent.objects.create(
            order=order, from_status="", to_status=Order.Status.REQUESTED,
            actor=actor, note="Order created",
        )
        logger.info("Order %s created for %s (%s %s)",
                    order.order_number, customer.name, order.quantity, order.unit)
        return order

    # ── Update (last write wins) ──────────────────────────────────────────────
    @transaction.atomic
    def update_order(self, order_id, data: dict, actor=None) -> Order:
        blocked = sorted(set(data) & set(PROTECTED_FIELDS))
        if blocked:
            raise ValidationError(
                f"Fields {', '.join(blocked)} change only through lifecycle actions.",
                code="protected_field",
            )
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)
        if order.status == Order.Status.DELIVERED and set(data) & set(MONEY_FIELDS):
            raise PreconditionError("Delivered orders cannot be re-priced.", code="order_delivered")
        if order.dispatched_at:
            locked = sorted(f for f in DISPATCH_LOCKED_FIELDS if f in data and data[f] != getattr(order, f))
            if locked:
                raise PreconditionError(
                    f"Fields {', '.join(locked)} cannot change after dispatch.", code="order_dispatched",
                )

        previous_total    = order.total_amount
        previous_quantity = order.quantity
        if set(data) & set(PRICING_FIELDS) and "total_amount" not in data:
            order.total_amount = Decimal("0")   # recomputed from the new sale figures
        for field, value in data.items():
            setattr(order, field, value)
        _validate_source(order.order_type, order.depot_id, order.supplier_id)

        quantity_delta = Decimal(str(order.quantity)) - previous_quantity
        if order.dispatched_at and quantity_delta and self._draws_stock(order):
            self._draw_stock(order, quantity_delta)
        order.save()

        # A dispatched order has its total posted to the receivable already
        if order.dispatched_at and order.total_amount != previous_total:
            adjust_customer_balance(order.customer_id, order.total_amount - previous_total)
            logger.info("Order %s re-priced after dispatch: %s → %s",
                        order.order_number, previous_total, order.total_amount)
        return order

    # ── Status writes ─────────────────────────────────────────────────────────
    def update_order_status(self, order_id, status: str, assignment: dict = None, actor=None) -> Order:
        if status not in Order.Status.values:
            raise ValidationError(f"Unknown status '{status}'.", code="invalid_status")
        if status == Order.Status.DELIVERED:
            raise PreconditionError(
                "Delivery must be confirmed through reconciliation with the customer's OTP.",
                code="reconciliation_required",
            )
        if status == Order.Status.DISPATCHED:
            return self.dispatch(order_id, actor=actor, **(assignment or {}))
        return self._move_pre_dispatch(order_id, status, actor)

    @transaction.atomic
    def _move_pre_dispatch(self, order_id, status, actor) -> Order:
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)
        if order.status == status:
            return order
        if Order.PIPELINE.index(status) < order.stage_index:
            raise PreconditionError(
                f"Order {order.order_number} cannot move back from {order.status} to {status}.",
                code="backward_transition",
            )
        from_status = order.status
        order.status = status
        order.save(update_fields=["status", "updated_at"])
        self._event(order, from_status, status, actor, f"Status set to {status}")
        logger.info("Order %s %s → %s", order.order_number, from_status, status)
        return order

    def advance(self, order_id, actor=None, **assignment) -> Order:
        """The "Next" action along requested → dispatched → delivered."""
        order = get_object_or_404(Order, pk=order_id)
        if order.status == Order.Status.DELIVERED:
            raise PreconditionError(f"Order {order.order_number} is already delivered.", code="terminal_state")
        if order.status == Order.Status.DISPATCHED:
            raise PreconditionError(
                "Delivery must be confirmed through reconciliation with the customer's OTP.",
                code="reconciliation_required",
            )
        return self.dispatch(order.id, actor=actor, **assignment)

    # ── Dispatch ──────────────────────────────────────────────────────────────
    @transaction.atomic
    def dispatch(self, order_id, truck_id=None, driver_id=None, fuel_cost=None,
                 driver_allowance=None, actor=None) -> Order:
        """
        Clear credit, validate the truck+driver pair against the eligible set,
        draw depot stock, reserve the pair, issue a fresh OTP and post the
        receivable — all or nothing.
        """
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)
        if order.status not in Order.PRE_DISPATCH:
            raise ConflictError(
                f"Order {order.order_number} is already {order.status}.", code="already_dispatched"
            )

        customer = Customer.objects.select_for_update().filter(pk=order.customer_id).first()
        if customer is not None and customer.is_blocked:
            raise PreconditionError(f"Customer {customer.name} is blocked.", code="customer_blocked")
        if not is_financially_cleared(order, customer):
            raise PreconditionError(self._clearance_message(order, customer), code="credit_limit_exceeded")

        truck_id = truck_id or order.truck_id
        truck = Truck.objects.select_for_update().filter(pk=truck_id).first() if truck_id else None
        if truck is None:
            raise PreconditionError("Assign a truck and driver before dispatch.", code="fleet_assignment_required")
        driver_id = driver_id or order.driver_id or truck.driver_id
        driver = Driver.objects.filter(pk=driver_id).first() if driver_id else None
        if driver is None:
            raise PreconditionError("Assign a truck and driver before dispatch.", code="fleet_assignment_required")

        self.resolver.validate_pair(truck, driver)
        if self._draws_stock(order):
            self._draw_stock(order, order.quantity)
        self.resolver.reserve(truck, driver, order)

        from_status            = order.status
        order.truck            = truck
        order.driver           = driver
        order.delivery_otp     = generate_otp()
        order.fuel_cost        = Decimal(str(fuel_cost)) if fuel_cost is not None else truck.default_fuel_cost
        order.driver_allowance = (Decimal(str(driver_allowance)) if driver_allowance is not None
                                  else driver.standard_allowance)
        order.status           = Order.Status.DISPATCHED
        order.dispatched_at    = timezone.now()
        order.save()

        adjust_customer_balance(order.customer_id, order.total_amount)

        self._event(order, from_status, Order.Status.DISPATCHED, actor,
                    f"Dispatched on {truck.plate_number} with {driver.name}")
        transaction.on_commit(lambda: self._notify_otp(order))
        logger.info("Order %s dispatched on %s / %s; receivable +%s",
                    order.order_number, truck.plate_number, driver.name, order.total_amount)
        return order

    @staticmethod
    def _clearance_message(order, customer):
        if customer is None:
            return f"Customer record for order {order.order_number} not found; cannot clear credit."
        return (
            f"Credit limit exceeded for {customer.name}: balance {customer.current_balance} + "
            f"order {order.total_amount} > limit {customer.credit_limit}. Confirm payment first."
        )

    def _notify_otp(self, order):
        if self.otp_notifier is not None:
            self.otp_notifier(order)
            return
        from apps.notifications.tasks import send_delivery_otp
        send_delivery_otp.delay(str(order.id))

    # ── Re-assignment ─────────────────────────────────────────────────────────
    @transaction.atomic
    def reassign_fleet(self, order_id, truck_id, driver_id=None, actor=None) -> Order:
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)
        if order.status != Order.Status.DISPATCHED:
            raise PreconditionError("Only dispatched orders can be re-assigned.", code="not_dispatched")

        truck = get_object_or_404(Truck.objects.select_for_update(), pk=truck_id)
        driver = get_object_or_404(Driver, pk=driver_id or truck.driver_id) if (driver_id or truck.driver_id) else None
        if driver is None:
            raise PreconditionError(f"Truck {truck.plate_number} has no assigned driver.", code="truck_no_driver")
        if truck.id == order.truck_id and driver.id == order.driver_id:
            return order

        old_plate = order.truck.plate_number if order.truck_id else "-"
        self.resolver.release(order, FleetReservation.ReleaseReason.REASSIGNED)
        self.resolver.validate_pair(truck, driver, order=order)
        self.resolver.reserve(truck, driver, order)

        order.truck  = truck
        order.driver = driver
        order.save(update_fields=["truck", "driver", "updated_at"])
        self._event(order, order.status, order.status, actor,
                    f"Fleet re-assigned {old_plate} → {truck.plate_number}")
        logger.info("Order %s re-assigned %s → %s", order.order_number, old_plate, truck.plate_number)
        return order

    # ── Payment override ──────────────────────────────────────────────────────
    @transaction.atomic
    def confirm_order_payment(self, order_id, actor=None) -> Order:
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)
        order.payment_status = Order.PaymentStatus.CONFIRMED
        order.save(update_fields=["payment_status", "updated_at"])
        self._event(order, order.status, order.status, actor, "Payment status confirmed")
        logger.info("Order %s payment confirmed by %s", order.order_number, getattr(actor, "phone", "system"))
        return order

    # ── Document numbers ──────────────────────────────────────────────────────
    @transaction.atomic
    def assign_document_numbers(self, order_id, gate_pass=False, loading_manifest=False) -> Order:
        """Allocate GP-/LM- numbers on first print; later prints reuse them."""
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)
        changed = []
        if gate_pass and not order.gate_pass_number:
            order.gate_pass_number = _generate_document_number("GP")
            changed.append("gate_pass_number")
        if loading_manifest and not order.loading_manifest_number:
            order.loading_manifest_number = _generate_document_number("LM")
            changed.append("loading_manifest_number")
        if changed:
            order.save(update_fields=changed + ["updated_at"])
            logger.info("Order %s numbered: %s", order.order_number, ", ".join(changed))
        return order

    # ── Delete (cascade) ──────────────────────────────────────────────────────
    @transaction.atomic
    def delete_order(self, order_id, actor=None) -> dict:
        """
        Remove the order and every row that references it, reversing its
        balance effects first. Plant-direct orders also drop their purchase.
        """
        order = get_object_or_404(Order.objects.select_for_update(), pk=order_id)

        delta = Decimal("0")
        if order.dispatched_at:
            delta -= order.total_amount
        delta += order.payments.filter(status=Payment.Status.CONFIRMED).aggregate(t=Sum("amount"))["t"] or 0
        delta += order.credit_notes.filter(status=CreditNote.Status.APPLIED).aggregate(t=Sum("amount"))["t"] or 0
        if delta:
            adjust_customer_balance(order.customer_id, delta)
        # Still on the truck: the load goes back on the depot's books
        if order.status == Order.Status.DISPATCHED and self._draws_stock(order):
            self._draw_stock(order, -order.quantity)

        removed = {}
        if order.order_type == Order.OrderType.PLANT_DIRECT:
            removed["purchases"] = Purchase.objects.filter(sales_order=order).delete()[0]
        removed["reservations"]        = FleetReservation.objects.filter(order=order).delete()[0]
        removed["expenses"]            = Expense.objects.filter(order=order).delete()[0]
        removed["payments"]            = Payment.objects.filter(order=order).delete()[0]
        removed["shortages"]           = Shortage.objects.filter(order=order).delete()[0]
        removed["driver_transactions"] = DriverTransaction.objects.filter(order=order).delete()[0]
        removed["credit_notes"]        = CreditNote.objects.filter(order=order).delete()[0]

        order_number = order.order_number
        order.delete()
        logger.info("Order %s deleted by %s; balance %+s; removed %s",
                    order_number, getattr(actor, "phone", "system"), delta, removed)
        return removed

    # ── Reads ─────────────────────────────────────────────────────────────────
    def list_orders(self, filters: dict = None, page: int = 1, page_size: int = 50):
        """Filtered, paginated listing: returns (orders, total_count)."""
        from apps.orders.filters import OrderFilter

        queryset = Order.objects.select_related("customer", "depot", "truck", "driver")
        qs = OrderFilter(filters or {}, queryset=queryset).qs
        total = qs.count()
        start = max(page - 1, 0) * page_size
        return list(qs[start:start + page_size]), total

    def get_order_metrics(self) -> dict:
        counts = {status: 0 for status in Order.ACTIVE_PIPELINE}
        counts.update(dict(
            Order.objects.order_by().values_list("status").annotate(c=Count("id"))
        ))
        today = timezone.localdate()
        return {
            "counts_by_status": counts,
            "busy_truck_ids":   sorted(str(t) for t in self.resolver.busy_truck_ids()),
            "orders_today":     Order.objects.filter(created_at__date=today).count(),
            "delivered_today":  Order.objects.filter(delivered_at__date=today).count(),
        }

    # ── Helpers ───────────────────────────────────────────────────────────────
    @staticmethod
    def _draws_stock(order) -> bool:
        return order.order_type == Order.OrderType.DEPOT_DISPATCH and bool(order.depot_id)

    @staticmethod
    def _draw_stock(order, quantity: Decimal):
        """Take ``quantity`` off the depot's row for the order's cement; negative puts it back."""
        stock = (
            Inventory.objects.select_for_update()
            .filter(depot_id=order.depot_id, cement_type=order.cement_type, unit=order.unit)
            .first()
        )
        if stock is None:
            if quantity < 0:
                logger.warning("No %s (%s) row at depot %s to return %s to",
                               order.cement_type, order.unit, order.depot_id, -quantity)
                return
            raise PreconditionError(
                f"{order.cement_type} ({order.unit}) is not stocked at {order.depot}.",
                code="insufficient_stock",
            )
        if stock.quantity < quantity:
            raise PreconditionError(
                f"Insufficient stock of {order.cement_type} at {order.depot}: "
                f"{stock.quantity} {order.unit} available, {quantity} required.",
                code="insufficient_stock",
            )
        Inventory.objects.filter(pk=stock.pk).update(
            quantity=F("quantity") - quantity, last_updated=timezone.now(),
        )
        logger.info("Stock %s / %s %s: %+s for %s",
                    order.depot_id, order.cement_type, order.unit, -quantity, order.order_number)

    @staticmethod
    def _event(order, from_status, to_status, actor, note):
        OrderEvent.objects.create(
            order=order, from_status=from_status, to_status=to_status, actor=actor, note=note[:255],
        )
