"""
CementOps Test Suite — Orders, Dispatch, Reconciliation, Fleet
================================================================
Covers: Unit | Integration | Conflict | Security | RBAC

Run:
    pytest tests/ -v

Requirements: pytest pytest-django rest_framework unittest.mock
"""

import re
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework import status

from apps.customers.models import Customer
from apps.finance.models import Expense, Payment
from apps.finance.service import PaymentService
from apps.fleet.models import ComplianceDocument, DriverTransaction, FleetReservation
from apps.fleet.service import DriverWalletService, FleetAvailabilityResolver
from apps.orders.exceptions import (
    AuthorizationError, ConflictError, PreconditionError, ValidationError,
)
from apps.orders.models import CreditNote, Depot, Inventory, Order, OrderEvent, Shortage
from apps.orders.reconciliation import ReconciliationEngine
from apps.orders.service import generate_otp


def _expire(entity, entity_type, days_ago=0):
    return ComplianceDocument.objects.create(
        entity_type=entity_type, entity_id=entity.id,
        document_type=ComplianceDocument.DocumentType.INSURANCE,
        expiry_date=timezone.localdate() - timedelta(days=days_ago),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# UNIT TESTS — Order totals and OTP
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestOrderTotals:
    """Derived money fields are recomputed on every save."""

    def test_total_defaults_to_cement_sale(self, make_order):
        order = make_order(quantity="600", price="5000")
        assert order.total_cement_sale == Decimal("3000000.00")
        assert order.total_amount == Decimal("3000000.00")

    def test_cement_profit_and_margin(self, make_order):
        order = make_order(quantity="100", price="5000", cement_purchase_price=Decimal("4500"))
        assert order.cement_profit == Decimal("50000.00")
        assert order.cement_margin_percent == Decimal("10.00")

    def test_explicit_total_kept(self, make_order):
        order = make_order(quantity="30", unit="tons", price="100000", total_amount=Decimal("3250000"))
        assert order.total_amount == Decimal("3250000")
        assert order.unit_price == Decimal("100000")

    def test_otp_is_six_digits(self):
        for _ in range(50):
            assert re.fullmatch(r"[1-9]\d{5}", generate_otp())


# ═══════════════════════════════════════════════════════════════════════════════
# ORDER CREATION
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestCreateOrder:

    def test_order_number_format_and_event(self, make_order):
        order = make_order()
        assert re.fullmatch(r"ORD-[A-Z0-9]{8}", order.order_number)
        assert order.status == Order.Status.REQUESTED
        event = OrderEvent.objects.get(order=order)
        assert event.to_status == Order.Status.REQUESTED

    def test_depot_dispatch_requires_depot(self, make_order):
        with pytest.raises(ValidationError) as exc:
            make_order(depot=None)
        assert exc.value.code == "depot_required"

    def test_plant_direct_requires_source(self, make_order):
        with pytest.raises(ValidationError) as exc:
            make_order(depot=None, order_type=Order.OrderType.PLANT_DIRECT)
        assert exc.value.code == "source_required"

    def test_plant_direct_with_supplier(self, make_order, supplier):
        order = make_order(depot=None, supplier=supplier, order_type=Order.OrderType.PLANT_DIRECT)
        assert order.supplier_id == supplier.id

    def test_blocked_customer_rejected(self, make_order, customer):
        customer.is_blocked = True
        customer.save()
        with pytest.raises(PreconditionError) as exc:
            make_order()
        assert exc.value.code == "customer_blocked"
        assert Order.objects.count() == 0

    def test_transport_cost_books_expense(self, make_order):
        order = make_order(transport_cost=Decimal("45000"))
        expense = Expense.objects.get(order=order)
        assert expense.category == Expense.Category.TRANSPORT
        assert expense.amount == Decimal("45000")

    def test_protected_fields_ignored_on_create(self, make_order):
        order = make_order(status=Order.Status.DELIVERED, delivery_otp="123456")
        assert order.status == Order.Status.REQUESTED
        assert order.delivery_otp == ""


# ═══════════════════════════════════════════════════════════════════════════════
# DISPATCH — credit gating and fleet eligibility
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDispatch:

    def test_dispatch_thirty_tons(self, controller, make_order, unit, customer):
        """30 tons on T1/D1: dispatched, 6-digit OTP, costs defaulted from masters."""
        truck, driver = unit
        order = make_order(quantity="30", unit="tons", price="100000")

        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)

        order.refresh_from_db()
        assert order.status == Order.Status.DISPATCHED
        assert re.fullmatch(r"\d{6}", order.delivery_otp)
        assert order.truck_id == truck.id and order.driver_id == driver.id
        assert order.fuel_cost == Decimal("85000")
        assert order.driver_allowance == Decimal("15000")
        assert order.total_trip_cost == Decimal("100000")
        assert order.dispatched_at is not None
        assert FleetReservation.objects.filter(order=order, truck=truck, released_at__isnull=True).exists()
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("3000000.00")

    def test_explicit_costs_override_masters(self, controller, make_order, unit):
        truck, driver = unit
        order = make_order()
        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id,
                            fuel_cost=Decimal("90000"), driver_allowance=Decimal("0"))
        order.refresh_from_db()
        assert order.fuel_cost == Decimal("90000")
        assert order.driver_allowance == Decimal("0")

    def test_driver_taken_from_truck_when_omitted(self, controller, make_order, unit):
        truck, driver = unit
        order = make_order()
        controller.dispatch(order.id, truck_id=truck.id)
        order.refresh_from_db()
        assert order.driver_id == driver.id

    def test_otp_notifier_called_on_commit(self, controller, make_order, unit,
                                           django_capture_on_commit_callbacks):
        truck, driver = unit
        order = make_order()
        with django_capture_on_commit_callbacks(execute=True):
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        controller.otp_notifier.assert_called_once()
        assert controller.otp_notifier.call_args[0][0].id == order.id

    def test_credit_limit_blocks_dispatch(self, controller, make_order, unit, customer):
        """Limit 100000, balance 90000, order 20000: blocked until paid."""
        truck, driver = unit
        customer.credit_limit = Decimal("100000")
        customer.current_balance = Decimal("90000")
        customer.save()
        order = make_order(quantity="4", price="5000")

        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "credit_limit_exceeded"

        order.refresh_from_db()
        assert order.status == Order.Status.REQUESTED
        assert order.delivery_otp == ""
        assert not FleetReservation.objects.exists()
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("90000")

    def test_confirmed_payment_clears_credit_gate(self, controller, make_order, unit, customer):
        truck, driver = unit
        customer.credit_limit = Decimal("100000")
        customer.current_balance = Decimal("90000")
        customer.save()
        order = make_order(quantity="4", price="5000")

        controller.confirm_order_payment(order.id)
        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)

        order.refresh_from_db()
        assert order.status == Order.Status.DISPATCHED

    def test_blocked_customer_cannot_dispatch(self, controller, make_order, unit, customer):
        truck, driver = unit
        order = make_order()
        Customer.objects.filter(pk=customer.pk).update(is_blocked=True)
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "customer_blocked"

    def test_dispatch_without_truck_rejected(self, controller, make_order):
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id)
        assert exc.value.code == "fleet_assignment_required"
        order.refresh_from_db()
        assert order.status == Order.Status.REQUESTED

    def test_unpaired_driver_rejected(self, controller, make_order, unit, make_unit):
        truck, _ = unit
        _, other_driver = make_unit(plate="KAN-202-XB", driver_name="Other Driver")
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=other_driver.id)
        assert exc.value.code == "driver_not_paired"

    def test_truck_without_driver_rejected(self, controller, make_order):
        from apps.fleet.models import Truck
        truck = Truck.objects.create(plate_number="NO-DRV-001")
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id)
        assert exc.value.code == "fleet_assignment_required"

    def test_expired_truck_document_rejected(self, controller, make_order, unit):
        truck, driver = unit
        _expire(truck, ComplianceDocument.EntityType.TRUCK)
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "truck_documents_expired"
        assert not FleetReservation.objects.exists()

    def test_expired_driver_document_rejected(self, controller, make_order, unit):
        truck, driver = unit
        _expire(driver, ComplianceDocument.EntityType.DRIVER, days_ago=3)
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "driver_documents_expired"

    def test_inactive_driver_rejected(self, controller, make_order, unit):
        truck, driver = unit
        driver.is_active = False
        driver.save()
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "driver_inactive"

    def test_second_dispatch_is_conflict(self, controller, dispatched_order, unit):
        truck, driver = unit
        with pytest.raises(ConflictError) as exc:
            controller.dispatch(dispatched_order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "already_dispatched"

    def test_busy_truck_rejected_for_second_order(self, controller, dispatched_order, make_order, unit):
        truck, driver = unit
        second = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(second.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "truck_busy"
        second.refresh_from_db()
        assert second.status == Order.Status.REQUESTED


# ═══════════════════════════════════════════════════════════════════════════════
# CONFLICT — reservation ledger
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestReservationConflict:
    """Two dispatches racing for one truck end with exactly one reservation."""

    def test_duplicate_active_reservation_is_conflict(self, dispatched_order, make_order, unit):
        truck, driver = unit
        loser = make_order()
        with pytest.raises(ConflictError) as exc:
            FleetAvailabilityResolver().reserve(truck, driver, loser)
        assert exc.value.code == "fleet_conflict"
        assert FleetReservation.objects.filter(truck=truck, released_at__isnull=True).count() == 1

    def test_released_truck_can_be_reserved_again(self, dispatched_order, make_order, unit):
        truck, driver = unit
        resolver = FleetAvailabilityResolver()
        resolver.release(dispatched_order, FleetReservation.ReleaseReason.CANCELLED)
        reservation = resolver.reserve(truck, driver, make_order())
        assert reservation.released_at is None


# ═══════════════════════════════════════════════════════════════════════════════
# STATUS WRITES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestStatusTransitions:

    def test_forward_pre_dispatch_moves(self, controller, make_order):
        order = make_order()
        controller.update_order_status(order.id, Order.Status.IN_GATE)
        controller.update_order_status(order.id, Order.Status.LOADED)
        order.refresh_from_db()
        assert order.status == Order.Status.LOADED
        assert order.events.count() == 3

    def test_backward_move_rejected(self, controller, make_order):
        order = make_order()
        controller.update_order_status(order.id, Order.Status.LOADED)
        with pytest.raises(PreconditionError) as exc:
            controller.update_order_status(order.id, Order.Status.IN_GATE)
        assert exc.value.code == "backward_transition"

    def test_same_status_is_noop(self, controller, make_order):
        order = make_order()
        controller.update_order_status(order.id, Order.Status.REQUESTED)
        assert order.events.count() == 1

    def test_delivered_only_through_reconciliation(self, controller, dispatched_order):
        with pytest.raises(PreconditionError) as exc:
            controller.update_order_status(dispatched_order.id, Order.Status.DELIVERED)
        assert exc.value.code == "reconciliation_required"

    def test_unknown_status(self, controller, make_order):
        with pytest.raises(ValidationError) as exc:
            controller.update_order_status(make_order().id, "lost")
        assert exc.value.code == "invalid_status"

    def test_status_dispatched_routes_through_dispatch(self, controller, make_order, unit):
        truck, driver = unit
        order = make_order()
        controller.update_order_status(order.id, Order.Status.DISPATCHED,
                                       assignment={"truck_id": truck.id, "driver_id": driver.id})
        order.refresh_from_db()
        assert order.status == Order.Status.DISPATCHED
        assert order.delivery_otp

    def test_advance_from_requested_dispatches(self, controller, make_order, unit):
        truck, driver = unit
        order = make_order()
        controller.advance(order.id, truck_id=truck.id, driver_id=driver.id)
        order.refresh_from_db()
        assert order.status == Order.Status.DISPATCHED

    def test_advance_from_dispatched_needs_reconciliation(self, controller, dispatched_order):
        with pytest.raises(PreconditionError) as exc:
            controller.advance(dispatched_order.id)
        assert exc.value.code == "reconciliation_required"


# ═══════════════════════════════════════════════════════════════════════════════
# UPDATE AND RE-ASSIGNMENT
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestUpdateOrder:

    def test_protected_fields_rejected(self, controller, make_order):
        with pytest.raises(ValidationError) as exc:
            controller.update_order(make_order().id, {"status": Order.Status.DELIVERED})
        assert exc.value.code == "protected_field"

    def test_reprice_before_dispatch_leaves_balance(self, controller, make_order, customer):
        order = make_order()
        order = controller.update_order(order.id, {"quantity": Decimal("500")})
        assert order.total_amount == Decimal("2500000.00")
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("0")

    def test_reprice_after_dispatch_moves_balance(self, controller, dispatched_order, customer):
        controller.update_order(dispatched_order.id, {"quantity": Decimal("500")})
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("2500000.00")

    def test_delivered_order_cannot_be_repriced(self, controller, dispatched_order):
        ReconciliationEngine().submit(dispatched_order.id, dispatched_order.delivery_otp, qty_good=600)
        with pytest.raises(PreconditionError) as exc:
            controller.update_order(dispatched_order.id, {"cement_sale_price": Decimal("5200")})
        assert exc.value.code == "order_delivered"

    def test_delivered_order_total_cannot_be_rewritten(self, controller, dispatched_order, customer):
        ReconciliationEngine().submit(dispatched_order.id, dispatched_order.delivery_otp, qty_good=600)
        with pytest.raises(PreconditionError) as exc:
            controller.update_order(dispatched_order.id, {"total_amount": Decimal("1")})
        assert exc.value.code == "order_delivered"
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("3000000.00")
        dispatched_order.refresh_from_db()
        assert dispatched_order.total_amount == Decimal("3000000.00")

    def test_customer_fixed_after_dispatch(self, controller, dispatched_order, customer):
        other = Customer.objects.create(name="Sani Blocks", phone="+2348035550002",
                                        credit_limit=Decimal("10000000.00"))
        with pytest.raises(PreconditionError) as exc:
            controller.update_order(dispatched_order.id, {"customer": other})
        assert exc.value.code == "order_dispatched"
        dispatched_order.refresh_from_db()
        assert dispatched_order.customer_id == customer.id
        customer.refresh_from_db()
        other.refresh_from_db()
        assert customer.current_balance == Decimal("3000000.00")
        assert other.current_balance == Decimal("0")

    def test_same_customer_in_payload_after_dispatch(self, controller, dispatched_order, customer):
        order = controller.update_order(dispatched_order.id, {"customer": customer, "notes": "Gate 3"})
        assert order.notes == "Gate 3"

    def test_customer_change_before_dispatch(self, controller, make_order):
        other = Customer.objects.create(name="Sani Blocks", phone="+2348035550002")
        order = controller.update_order(make_order().id, {"customer": other})
        assert order.customer_id == other.id

    def test_depot_cannot_be_cleared(self, controller, make_order, depot):
        order = make_order()
        with pytest.raises(ValidationError) as exc:
            controller.update_order(order.id, {"depot": None})
        assert exc.value.code == "depot_required"
        order.refresh_from_db()
        assert order.depot_id == depot.id

    def test_switch_to_plant_direct_needs_a_source(self, controller, make_order, supplier):
        order = make_order()
        with pytest.raises(ValidationError) as exc:
            controller.update_order(order.id, {"order_type": Order.OrderType.PLANT_DIRECT, "depot": None})
        assert exc.value.code == "source_required"
        order = controller.update_order(order.id, {
            "order_type": Order.OrderType.PLANT_DIRECT, "depot": None, "supplier": supplier,
        })
        assert order.order_type == Order.OrderType.PLANT_DIRECT

    def test_reprice_after_dispatch_moves_stock(self, controller, dispatched_order, stock):
        controller.update_order(dispatched_order.id, {"quantity": Decimal("500")})
        stock.refresh_from_db()
        assert stock.quantity == Decimal("99500")


@pytest.mark.django_db
class TestReassignFleet:

    def test_reassign_moves_reservation(self, controller, dispatched_order, unit, make_unit):
        old_truck, _ = unit
        new_truck, new_driver = make_unit(plate="T2-KAN-002", driver_name="D2 Sani")

        controller.reassign_fleet(dispatched_order.id, new_truck.id)

        dispatched_order.refresh_from_db()
        assert dispatched_order.truck_id == new_truck.id
        assert dispatched_order.driver_id == new_driver.id
        old = FleetReservation.objects.get(truck=old_truck)
        assert old.released_at is not None
        assert old.release_reason == FleetReservation.ReleaseReason.REASSIGNED
        assert FleetReservation.objects.filter(truck=new_truck, released_at__isnull=True).exists()

    def test_reassign_to_busy_truck_keeps_original(self, controller, dispatched_order, make_order,
                                                   unit, make_unit):
        old_truck, _ = unit
        busy_truck, busy_driver = make_unit(plate="T3-KAN-003", driver_name="D3 Audu")
        other = make_order()
        controller.dispatch(other.id, truck_id=busy_truck.id, driver_id=busy_driver.id)

        with pytest.raises(PreconditionError) as exc:
            controller.reassign_fleet(dispatched_order.id, busy_truck.id)
        assert exc.value.code == "truck_busy"
        assert FleetReservation.objects.filter(
            truck=old_truck, order=dispatched_order, released_at__isnull=True,
        ).exists()

    def test_only_dispatched_orders(self, controller, make_order, unit):
        truck, _ = unit
        with pytest.raises(PreconditionError) as exc:
            controller.reassign_fleet(make_order().id, truck.id)
        assert exc.value.code == "not_dispatched"


# ═══════════════════════════════════════════════════════════════════════════════
# RECONCILIATION
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestReconciliation:

    def setup_method(self):
        self.engine = ReconciliationEngine()

    def _thirty_tons(self, controller, make_order, unit):
        truck, driver = unit
        order = make_order(quantity="30", unit="tons", price="100000")
        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        order.refresh_from_db()
        return order

    def test_short_delivery_charged_to_driver(self, controller, make_order, unit, customer):
        """28 good / 2 missing / 0 damaged with the right OTP and a reason."""
        truck, driver = unit
        order = self._thirty_tons(controller, make_order, unit)

        shortage = self.engine.submit(order.id, order.delivery_otp, qty_good=Decimal("28"),
                                      qty_missing=Decimal("2"), reason="Two tons offloaded en route")

        order.refresh_from_db()
        assert order.status == Order.Status.DELIVERED
        assert order.delivered_at is not None
        assert shortage.liability == Shortage.Liability.DRIVER
        assert shortage.shortage_quantity == Decimal("2")
        assert shortage.deduction_amount == Decimal("200000.00")
        assert shortage.status == Shortage.Status.DEDUCTED

        tx = DriverTransaction.objects.get(order=order)
        assert tx.type == DriverTransaction.Type.SHORTAGE_DEDUCTION
        assert tx.amount == Decimal("200000.00")
        assert DriverWalletService().balance(driver) == Decimal("-200000.00")

        note = CreditNote.objects.get(order=order)
        assert note.amount == Decimal("200000.00")
        assert note.status == CreditNote.Status.APPLIED
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("2800000.00")

        driver.refresh_from_db()
        assert driver.total_trips == 1
        assert driver.total_delivered == Decimal("28")
        assert FleetReservation.objects.get(order=order).release_reason == FleetReservation.ReleaseReason.DELIVERED
        assert truck.id in {t.id for t in FleetAvailabilityResolver().available_units()}

    def test_clean_delivery(self, dispatched_order):
        shortage = self.engine.submit(dispatched_order.id, dispatched_order.delivery_otp, qty_good=600)
        assert shortage.shortage_quantity == 0
        assert shortage.liability == Shortage.Liability.COMPANY
        assert shortage.status == Shortage.Status.APPROVED
        assert not CreditNote.objects.exists()
        assert not DriverTransaction.objects.exists()

    def test_company_liability_skips_wallet(self, dispatched_order):
        shortage = self.engine.submit(
            dispatched_order.id, dispatched_order.delivery_otp, qty_good=590, qty_damaged=10,
            reason="Rain damage at site", liability=Shortage.Liability.COMPANY,
        )
        assert shortage.deduction_amount == 0
        assert shortage.status == Shortage.Status.APPROVED
        assert not DriverTransaction.objects.exists()
        assert CreditNote.objects.get(order=dispatched_order).amount == Decimal("50000.00")

    def test_zero_driver_deduction_left_pending(self, dispatched_order):
        shortage = self.engine.submit(
            dispatched_order.id, dispatched_order.delivery_otp, qty_good=595, qty_missing=5,
            reason="Under review", liability=Shortage.Liability.DRIVER, deduction_amount=0,
        )
        assert shortage.status == Shortage.Status.PENDING
        assert not DriverTransaction.objects.exists()

    def test_clean_delivery_never_charges_driver(self, dispatched_order, unit):
        _, driver = unit
        shortage = self.engine.submit(
            dispatched_order.id, dispatched_order.delivery_otp, qty_good=600,
            liability=Shortage.Liability.DRIVER, deduction_amount=Decimal("50000"),
        )
        assert shortage.liability == Shortage.Liability.COMPANY
        assert shortage.deduction_amount == 0
        assert shortage.status == Shortage.Status.APPROVED
        assert not DriverTransaction.objects.exists()
        assert DriverWalletService().balance(driver) == Decimal("0")

    def test_tolerance_comes_from_settings(self, settings, dispatched_order):
        settings.RECONCILIATION_TOLERANCE = Decimal("1")
        shortage = self.engine.submit(dispatched_order.id, dispatched_order.delivery_otp,
                                      qty_good=Decimal("599.5"))
        assert shortage.received_quantity == Decimal("599.5")

    def test_default_tolerance_rejects_half_a_bag(self, dispatched_order):
        with pytest.raises(ValidationError) as exc:
            self.engine.submit(dispatched_order.id, dispatched_order.delivery_otp, qty_good=Decimal("599.5"))
        assert exc.value.code == "quantity_mismatch"

    def test_quantity_mismatch_rejected_with_correct_otp(self, dispatched_order):
        with pytest.raises(ValidationError) as exc:
            self.engine.submit(dispatched_order.id, dispatched_order.delivery_otp, qty_good=590)
        assert exc.value.code == "quantity_mismatch"

    def test_quantity_mismatch_rejected_before_otp(self, dispatched_order):
        with pytest.raises(ValidationError) as exc:
            self.engine.submit(dispatched_order.id, "000000", qty_good=100)
        assert exc.value.code == "quantity_mismatch"

    def test_negative_quantity_rejected(self, dispatched_order):
        with pytest.raises(ValidationError):
            self.engine.submit(dispatched_order.id, dispatched_order.delivery_otp,
                               qty_good=610, qty_missing=-10, reason="x")

    def test_wrong_otp_rejected(self, dispatched_order):
        with pytest.raises(AuthorizationError) as exc:
            self.engine.submit(dispatched_order.id, "000000", qty_good=600)
        assert exc.value.code == "otp_mismatch"
        dispatched_order.refresh_from_db()
        assert dispatched_order.status == Order.Status.DISPATCHED
        assert not Shortage.objects.exists()

    def test_blank_otp_rejected(self, dispatched_order):
        with pytest.raises(AuthorizationError):
            self.engine.submit(dispatched_order.id, "", qty_good=600)

    def test_reason_required_for_shortage(self, dispatched_order):
        with pytest.raises(ValidationError) as exc:
            self.engine.submit(dispatched_order.id, dispatched_order.delivery_otp,
                               qty_good=590, qty_missing=10, reason="  ")
        assert exc.value.code == "reason_required"

    def test_resubmission_is_conflict(self, dispatched_order):
        otp = dispatched_order.delivery_otp
        self.engine.submit(dispatched_order.id, otp, qty_good=590, qty_missing=10, reason="Torn bags")
        with pytest.raises(ConflictError) as exc:
            self.engine.submit(dispatched_order.id, otp, qty_good=590, qty_missing=10, reason="Torn bags")
        assert exc.value.code == "already_reconciled"
        assert Shortage.objects.count() == 1
        assert DriverTransaction.objects.count() == 1
        assert CreditNote.objects.count() == 1

    def test_requested_order_cannot_be_reconciled(self, make_order):
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            self.engine.submit(order.id, "123456", qty_good=600)
        assert exc.value.code == "not_dispatched"


# ═══════════════════════════════════════════════════════════════════════════════
# DELETION
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDeleteOrder:

    def test_delete_removes_dependents_and_reverses_balance(self, controller, make_order, unit, customer):
        truck, driver = unit
        order = make_order(transport_cost=Decimal("40000"))
        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        order.refresh_from_db()
        PaymentService().record_payment(customer, Decimal("1000000"), Payment.Method.CASH, order=order)
        ReconciliationEngine().submit(order.id, order.delivery_otp, qty_good=590, qty_missing=10,
                                      reason="Torn bags")
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("1950000.00")

        removed = controller.delete_order(order.id)

        assert not Order.objects.filter(pk=order.pk).exists()
        assert removed["payments"] == 1
        assert removed["expenses"] == 1
        assert removed["shortages"] == 1
        assert removed["driver_transactions"] == 1
        assert removed["credit_notes"] == 1
        assert removed["reservations"] == 1
        for model in (Payment, Expense, Shortage, DriverTransaction, CreditNote, FleetReservation, OrderEvent):
            assert not model.objects.filter(order_id=order.id).exists()
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("0")

    def test_delete_in_transit_frees_truck(self, controller, dispatched_order, unit):
        truck, _ = unit
        controller.delete_order(dispatched_order.id)
        assert truck.id in {t.id for t in FleetAvailabilityResolver().available_units()}

    def test_delete_plant_direct_drops_purchase(self, controller, make_order, supplier):
        from apps.finance.models import Purchase
        order = make_order(depot=None, supplier=supplier, order_type=Order.OrderType.PLANT_DIRECT)
        Purchase.objects.create(purchase_number="PO-TEST0001", supplier=supplier, cement_type="42.5R",
                                quantity=Decimal("600"), cost_per_unit=Decimal("4500"), sales_order=order)
        removed = controller.delete_order(order.id)
        assert removed["purchases"] == 1
        assert not Purchase.objects.exists()


# ═══════════════════════════════════════════════════════════════════════════════
# FLEET AVAILABILITY
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestFleetAvailability:

    def test_available_units_sorted_by_plate(self, make_unit):
        make_unit(plate="ZZZ-900-KN", driver_name="Zainab")
        make_unit(plate="AAA-100-KN", driver_name="Abubakar")
        plates = [t.plate_number for t in FleetAvailabilityResolver().available_units()]
        assert plates == ["AAA-100-KN", "ZZZ-900-KN"]

    def test_ineligible_units_excluded(self, make_unit, dispatched_order, unit):
        from apps.fleet.models import Truck
        busy, _ = unit
        expired, _ = make_unit(plate="EXP-001-KN", driver_name="Expired Doc")
        _expire(expired, ComplianceDocument.EntityType.TRUCK)
        inactive, _ = make_unit(plate="OFF-001-KN", driver_name="Parked", is_active=False)
        Truck.objects.create(plate_number="NODRV-01")
        ok, _ = make_unit(plate="OK-001-KN", driver_name="Ready Rabiu")

        ids = {t.id for t in FleetAvailabilityResolver().available_units()}
        assert ids == {ok.id}
        assert busy.id not in ids

    def test_document_expiring_tomorrow_still_valid(self, make_unit):
        truck, _ = make_unit()
        ComplianceDocument.objects.create(
            entity_type=ComplianceDocument.EntityType.TRUCK, entity_id=truck.id,
            document_type=ComplianceDocument.DocumentType.ROAD_WORTHINESS,
            expiry_date=timezone.localdate() + timedelta(days=1),
        )
        assert [t.id for t in FleetAvailabilityResolver().available_units()] == [truck.id]

    def test_resolver_today_is_injectable(self, make_unit):
        truck, _ = make_unit()
        _expire(truck, ComplianceDocument.EntityType.TRUCK, days_ago=-10)
        assert FleetAvailabilityResolver().available_units()
        later = FleetAvailabilityResolver(today=timezone.localdate() + timedelta(days=10))
        assert later.available_units() == []

    def _driver_on_second_truck(self, unit):
        """Move the mid-trip driver onto a fresh truck behind the API's back."""
        from apps.fleet.models import Truck
        reserved, driver = unit
        Truck.objects.filter(pk=reserved.pk).update(driver=None)
        return Truck.objects.create(plate_number="B-2", driver=driver), driver

    def test_driver_on_trip_not_offered(self, dispatched_order, unit):
        spare, _ = self._driver_on_second_truck(unit)
        resolver = FleetAvailabilityResolver()
        assert spare.id not in {t.id for t in resolver.available_units()}
        assert unit[1].id in resolver.busy_driver_ids()

    def test_driver_on_trip_cannot_dispatch_again(self, controller, dispatched_order, make_order, unit):
        spare, driver = self._driver_on_second_truck(unit)
        second = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(second.id, truck_id=spare.id, driver_id=driver.id)
        assert exc.value.code == "driver_busy"
        second.refresh_from_db()
        assert second.status == Order.Status.REQUESTED

    def test_driver_keeps_own_order_on_revalidation(self, dispatched_order, unit):
        truck, driver = unit
        FleetAvailabilityResolver().validate_pair(truck, driver, order=dispatched_order)

    def test_truck_driver_fixed_during_trip(self, auth_client, dispatched_order, unit):
        truck, driver = unit
        resp = auth_client.patch(f"/api/fleet/trucks/{truck.id}/", {"driver": None}, format="json")
        assert resp.status_code == 422
        assert resp.data["code"] == "truck_busy"
        truck.refresh_from_db()
        assert truck.driver_id == driver.id

    def test_truck_driver_changes_when_idle(self, auth_client, unit):
        truck, _ = unit
        resp = auth_client.patch(f"/api/fleet/trucks/{truck.id}/", {"driver": None}, format="json")
        assert resp.status_code == 200
        truck.refresh_from_db()
        assert truck.driver_id is None


# ═══════════════════════════════════════════════════════════════════════════════
# READS — listing, filters, metrics, document numbers
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestOrderReads:

    def test_list_filters_and_pagination(self, controller, make_order, unit):
        truck, driver = unit
        orders = [make_order() for _ in range(3)]
        controller.dispatch(orders[0].id, truck_id=truck.id, driver_id=driver.id)

        results, total = controller.list_orders({"status": "dispatched"})
        assert total == 1 and results[0].id == orders[0].id

        results, total = controller.list_orders({}, page=2, page_size=2)
        assert total == 3 and len(results) == 1

    def test_search_by_order_number_and_customer(self, controller, make_order):
        order = make_order()
        make_order()
        results, total = controller.list_orders({"search": order.order_number.lower()})
        assert total == 1 and results[0].id == order.id
        _, total = controller.list_orders({"search": "bello"})
        assert total == 2

    def test_metrics(self, controller, dispatched_order, make_order, unit):
        truck, _ = unit
        make_order()
        metrics = controller.get_order_metrics()
        assert metrics["counts_by_status"]["requested"] == 1
        assert metrics["counts_by_status"]["dispatched"] == 1
        assert metrics["counts_by_status"]["delivered"] == 0
        assert metrics["busy_truck_ids"] == [str(truck.id)]
        assert metrics["orders_today"] == 2
        assert metrics["delivered_today"] == 0

    def test_document_numbers_assigned_once(self, controller, make_order):
        order = make_order()
        first = controller.assign_document_numbers(order.id, gate_pass=True)
        assert re.fullmatch(r"GP-\d{8}-\d{4}", first.gate_pass_number)
        assert first.loading_manifest_number == ""
        again = controller.assign_document_numbers(order.id, gate_pass=True, loading_manifest=True)
        assert again.gate_pass_number == first.gate_pass_number
        assert again.loading_manifest_number.startswith("LM-")


# ═══════════════════════════════════════════════════════════════════════════════
# DEPOT STOCK
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDepotStock:
    """Depot dispatches draw stock in the same transaction as the receivable."""

    def test_dispatch_draws_stock(self, dispatched_order, stock):
        stock.refresh_from_db()
        assert stock.quantity == Decimal("99400")

    def test_tons_drawn_from_tons_row(self, controller, make_order, unit, depot):
        truck, driver = unit
        order = make_order(quantity="30", unit="tons", price="100000")
        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert Inventory.objects.get(depot=depot, unit="tons").quantity == Decimal("4970")
        assert Inventory.objects.get(depot=depot, unit="bags").quantity == Decimal("100000")

    def test_short_stock_blocks_dispatch(self, controller, make_order, unit, stock, customer):
        truck, driver = unit
        Inventory.objects.filter(pk=stock.pk).update(quantity=Decimal("599"))
        order = make_order()
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "insufficient_stock"
        order.refresh_from_db()
        assert order.status == Order.Status.REQUESTED
        stock.refresh_from_db()
        assert stock.quantity == Decimal("599")
        assert not FleetReservation.objects.exists()
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("0")

    def test_unlisted_cement_blocks_dispatch(self, controller, make_order, unit):
        truck, driver = unit
        order = make_order(cement_type="Lafarge Supaset")
        with pytest.raises(PreconditionError) as exc:
            controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert exc.value.code == "insufficient_stock"

    def test_plant_direct_leaves_depot_stock(self, controller, make_order, unit, supplier, depot):
        truck, driver = unit
        order = make_order(depot=None, supplier=supplier, order_type=Order.OrderType.PLANT_DIRECT)
        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        assert Inventory.objects.get(depot=depot, unit="bags").quantity == Decimal("100000")

    def test_delete_in_transit_restocks(self, controller, dispatched_order, stock):
        controller.delete_order(dispatched_order.id)
        stock.refresh_from_db()
        assert stock.quantity == Decimal("100000")

    def test_delete_delivered_keeps_stock_drawn(self, controller, dispatched_order, stock):
        ReconciliationEngine().submit(dispatched_order.id, dispatched_order.delivery_otp, qty_good=600)
        controller.delete_order(dispatched_order.id)
        stock.refresh_from_db()
        assert stock.quantity == Decimal("99400")

    def test_depot_fixed_after_dispatch(self, controller, dispatched_order):
        other = Depot.objects.create(name="Kaduna Depot")
        with pytest.raises(PreconditionError) as exc:
            controller.update_order(dispatched_order.id, {"depot": other})
        assert exc.value.code == "order_dispatched"


@pytest.mark.django_db
class TestInventoryAPI:

    def test_list_filtered_by_depot(self, auth_client, depot):
        Depot.objects.create(name="Kaduna Depot").inventory.create(cement_type="BUA 42.5", quantity=50)
        resp = auth_client.get("/api/inventory/", {"depot": str(depot.id)})
        assert resp.status_code == 200
        rows = resp.data["results"]
        assert {r["cement_type"] for r in rows} == {"Dangote 42.5R"}
        assert {r["depot_name"] for r in rows} == {"Kano Depot"}

    def test_manager_adds_product_line(self, manager_client, depot):
        resp = manager_client.post("/api/inventory/", {
            "depot": str(depot.id), "cement_type": "BUA 42.5", "unit": "bags",
            "quantity": "2500", "cost_price_bag": "4300", "selling_price_bag": "4800",
        }, format="json")
        assert resp.status_code == 201
        assert Inventory.objects.get(depot=depot, cement_type="BUA 42.5").quantity == Decimal("2500")

    def test_duplicate_product_line_is_400(self, manager_client, depot):
        resp = manager_client.post("/api/inventory/", {
            "depot": str(depot.id), "cement_type": "Dangote 42.5R", "unit": "bags", "quantity": "10",
        }, format="json")
        assert resp.status_code == 400
        assert Inventory.objects.filter(depot=depot, cement_type="Dangote 42.5R").count() == 2

    def test_dispatcher_cannot_adjust_stock(self, auth_client, stock):
        resp = auth_client.patch(f"/api/inventory/{stock.id}/", {"quantity": "1"}, format="json")
        assert resp.status_code == 403
        assert resp.data["code"] == "forbidden"
        stock.refresh_from_db()
        assert stock.quantity == Decimal("100000")

    def test_manager_restocks(self, manager_client, stock):
        resp = manager_client.patch(f"/api/inventory/{stock.id}/", {"quantity": "120000"}, format="json")
        assert resp.status_code == 200
        stock.refresh_from_db()
        assert stock.quantity == Decimal("120000")

    def test_negative_stock_rejected(self, manager_client, stock):
        resp = manager_client.patch(f"/api/inventory/{stock.id}/", {"quantity": "-5"}, format="json")
        assert resp.status_code == 400

    def test_manager_removes_product_line(self, manager_client, stock):
        assert manager_client.delete(f"/api/inventory/{stock.id}/").status_code == 204
        assert not Inventory.objects.filter(pk=stock.pk).exists()


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — HTTP API
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestOrderAPI:

    def test_create_and_fetch(self, auth_client, customer, depot):
        resp = auth_client.post("/api/orders/", {
            "customer":          str(customer.id),
            "depot":             str(depot.id),
            "cement_type":       "BUA 42.5",
            "quantity":          "600",
            "unit":              "bags",
            "cement_sale_price": "5000",
        }, format="json")
        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["order_number"].startswith("ORD-")
        assert resp.data["status"] == "requested"
        assert Decimal(resp.data["total_amount"]) == Decimal("3000000")
        assert "delivery_otp" not in resp.data

        resp = auth_client.get(f"/api/orders/{resp.data['id']}/")
        assert resp.status_code == 200
        assert resp.data["events"][0]["to_status"] == "requested"

    def test_list_paginated(self, auth_client, make_order):
        make_order()
        resp = auth_client.get("/api/orders/", {"page_size": 1})
        assert resp.status_code == 200
        assert resp.data["count"] == 1
        assert resp.data["page_size"] == 1
        assert len(resp.data["results"]) == 1

    def test_missing_depot_is_400(self, auth_client, customer):
        resp = auth_client.post("/api/orders/", {
            "customer": str(customer.id), "cement_type": "BUA 42.5",
            "quantity": "600", "unit": "bags", "cement_sale_price": "5000",
        }, format="json")
        assert resp.status_code == 400
        assert resp.data["code"] == "depot_required"

    def test_patch_protected_field_is_400(self, auth_client, make_order):
        resp = auth_client.patch(f"/api/orders/{make_order().id}/", {"status": "delivered"}, format="json")
        assert resp.status_code == 400
        assert resp.data["code"] == "protected_field"

    def test_dispatch_and_reconcile_flow(self, auth_client, make_order, unit):
        truck, driver = unit
        order = make_order()

        resp = auth_client.post(f"/api/orders/{order.id}/dispatch/", {
            "truck": str(truck.id), "driver": str(driver.id),
        }, format="json")
        assert resp.status_code == 200
        assert resp.data["status"] == "dispatched"
        assert resp.data["truck_plate"] == truck.plate_number

        resp = auth_client.post(f"/api/orders/{order.id}/reconcile/", {
            "otp": "000000", "qty_good": "600",
        }, format="json")
        assert resp.status_code == 403
        assert resp.data["code"] == "otp_mismatch"

        order.refresh_from_db()
        resp = auth_client.post(f"/api/orders/{order.id}/reconcile/", {
            "otp": order.delivery_otp, "qty_good": "598", "qty_damaged": "2", "reason": "Burst bags",
        }, format="json")
        assert resp.status_code == 201
        assert resp.data["liability"] == "driver"
        assert resp.data["status"] == "deducted"

        resp = auth_client.get(f"/api/orders/{order.id}/")
        assert resp.data["status"] == "delivered"
        assert resp.data["shortage"]["shortage_quantity"] == "2.00"

    def test_dispatch_over_limit_is_422(self, auth_client, make_order, unit, customer):
        truck, driver = unit
        customer.credit_limit = Decimal("1000")
        customer.save()
        resp = auth_client.post(f"/api/orders/{make_order().id}/dispatch/", {
            "truck": str(truck.id), "driver": str(driver.id),
        }, format="json")
        assert resp.status_code == 422
        assert resp.data["code"] == "credit_limit_exceeded"

    def test_second_dispatch_is_409(self, auth_client, dispatched_order, unit):
        truck, driver = unit
        resp = auth_client.post(f"/api/orders/{dispatched_order.id}/dispatch/", {
            "truck": str(truck.id), "driver": str(driver.id),
        }, format="json")
        assert resp.status_code == 409

    def test_next_and_status_endpoints(self, auth_client, make_order, unit):
        truck, driver = unit
        order = make_order()
        resp = auth_client.patch(f"/api/orders/{order.id}/status/", {"status": "in_gate"}, format="json")
        assert resp.status_code == 200 and resp.data["status"] == "in_gate"
        resp = auth_client.post(f"/api/orders/{order.id}/next/", {
            "truck": str(truck.id), "driver": str(driver.id),
        }, format="json")
        assert resp.status_code == 200 and resp.data["status"] == "dispatched"
        resp = auth_client.post(f"/api/orders/{order.id}/next/", {}, format="json")
        assert resp.status_code == 422

    def test_reassign_endpoint(self, auth_client, dispatched_order, make_unit):
        truck, _ = make_unit(plate="T9-KAN-009", driver_name="D9 Yusuf")
        resp = auth_client.post(f"/api/orders/{dispatched_order.id}/reassign/",
                                {"truck": str(truck.id)}, format="json")
        assert resp.status_code == 200
        assert resp.data["truck_plate"] == "T9-KAN-009"

    def test_metrics_endpoint(self, auth_client, dispatched_order, unit):
        truck, _ = unit
        resp = auth_client.get("/api/orders/metrics/")
        assert resp.status_code == 200
        assert resp.data["counts_by_status"]["dispatched"] == 1
        assert resp.data["busy_truck_ids"] == [str(truck.id)]

    def test_unknown_order_is_404(self, auth_client):
        resp = auth_client.get("/api/orders/00000000-0000-0000-0000-000000000000/")
        assert resp.status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# SECURITY — RBAC
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestRBAC:

    def test_unauthenticated_cannot_list_orders(self, api_client):
        assert api_client.get("/api/orders/").status_code == 401

    def test_accountant_cannot_dispatch(self, finance_client, make_order, unit):
        truck, driver = unit
        resp = finance_client.post(f"/api/orders/{make_order().id}/dispatch/", {
            "truck": str(truck.id), "driver": str(driver.id),
        }, format="json")
        assert resp.status_code == 403

    def test_dispatcher_cannot_confirm_payment(self, auth_client, make_order):
        resp = auth_client.post(f"/api/orders/{make_order().id}/confirm-payment/")
        assert resp.status_code == 403

    def test_accountant_confirms_payment(self, finance_client, make_order):
        resp = finance_client.post(f"/api/orders/{make_order().id}/confirm-payment/")
        assert resp.status_code == 200
        assert resp.data["payment_status"] == "Confirmed"

    def test_dispatcher_cannot_delete(self, auth_client, make_order):
        order = make_order()
        assert auth_client.delete(f"/api/orders/{order.id}/").status_code == 403
        assert Order.objects.filter(pk=order.pk).exists()

    def test_manager_deletes(self, manager_client, dispatched_order):
        resp = manager_client.delete(f"/api/orders/{dispatched_order.id}/")
        assert resp.status_code == 200
        assert resp.data["removed"]["reservations"] == 1
        assert not Order.objects.exists()

    def test_dispatcher_cannot_block_customer(self, auth_client, customer):
        resp = auth_client.post(f"/api/customers/{customer.id}/block/", {"is_blocked": True}, format="json")
        assert resp.status_code == 403

    def test_only_admin_changes_roles(self, manager_client, dispatcher):
        resp = manager_client.patch(f"/api/auth/agents/{dispatcher.id}/role/", {"role": "ADMIN"}, format="json")
        assert resp.status_code == 403
        assert resp.data["code"] == "forbidden"
        dispatcher.refresh_from_db()
        assert dispatcher.role == "DISPATCHER"

    def test_admin_changes_role(self, api_client, make_agent, dispatcher):
        api_client.force_authenticate(user=make_agent(role="ADMIN", full_name="Admin Aisha"))
        resp = api_client.patch(f"/api/auth/agents/{dispatcher.id}/role/", {"role": "MANAGER"}, format="json")
        assert resp.status_code == 200
        dispatcher.refresh_from_db()
        assert dispatcher.role == "MANAGER"


# ═══════════════════════════════════════════════════════════════════════════════
# REGISTRATION & AUTH
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestRegistrationAndAuth:

    def test_register_starts_as_dispatcher(self, api_client):
        resp = api_client.post("/api/auth/register/", {
            "phone": "+2348039990001", "full_name": "New Clerk", "password": "Secure@2024",
        }, format="json")
        assert resp.status_code == 201
        from apps.authentication.models import Agent
        assert Agent.objects.get(phone="+2348039990001").role == "DISPATCHER"

    def test_register_invalid_phone(self, api_client):
        resp = api_client.post("/api/auth/register/", {
            "phone": "+1-555-000-0000", "full_name": "Foreign User", "password": "Secure@2024",
        }, format="json")
        assert resp.status_code == 400

    def test_login_returns_token(self, api_client, dispatcher):
        resp = api_client.post("/api/auth/login/", {
            "phone": dispatcher.phone, "password": "Test@1234",
        }, format="json")
        assert resp.status_code == 200
        assert "access" in resp.data

    def test_profile_returns_own_data(self, auth_client, dispatcher):
        resp = auth_client.get("/api/auth/me/")
        assert resp.status_code == 200
        assert resp.data["phone"] == dispatcher.phone
        assert resp.data["role"] == "DISPATCHER"
