"""
CementOps Test Suite — Finance, Documents, Notifications, Reports, Ops
=======================================================================
Covers: ledger services | printable documents | Celery tasks | order feed
        | analytics | health and metrics

Run:
    pytest tests/test_finance.py -v
"""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch, MagicMock

import pytest
import requests
from django.utils import timezone
from rest_framework import status

from apps.customers.models import Customer
from apps.finance.models import ManufacturerWallet, Payment, Purchase, SupplierPayment, WalletTransaction
from apps.finance.service import (
    PaymentService, ProcurementService, adjust_customer_balance, get_customer_balance,
    is_financially_cleared, trip_profitability,
)
from apps.fleet.models import ComplianceDocument, DriverTransaction
from apps.fleet.service import DriverWalletService, record_driver_wallet_transaction
from apps.orders.exceptions import ConflictError, PreconditionError, ValidationError
from apps.orders.models import Order
from apps.orders.reconciliation import ReconciliationEngine


# ═══════════════════════════════════════════════════════════════════════════════
# CREDIT CLEARANCE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestClearance:

    def test_within_limit(self, make_order, customer):
        assert is_financially_cleared(make_order(), customer)

    def test_exact_limit_clears(self, make_order, customer):
        customer.credit_limit = Decimal("3000000")
        assert is_financially_cleared(make_order(), customer)

    def test_over_limit_blocked(self, make_order, customer):
        customer.credit_limit = Decimal("100000")
        customer.current_balance = Decimal("90000")
        assert not is_financially_cleared(make_order(quantity="4"), customer)

    def test_confirmed_payment_always_clears(self, make_order, customer):
        customer.credit_limit = Decimal("0")
        order = make_order()
        order.payment_status = Order.PaymentStatus.CONFIRMED
        assert is_financially_cleared(order, customer)

    def test_missing_customer_fails_closed(self, make_order):
        assert not is_financially_cleared(make_order(), None)
        assert is_financially_cleared(make_order(), None, fail_open=True)

    def test_balance_helpers(self, customer):
        adjust_customer_balance(customer.id, Decimal("2500000"))
        balance = get_customer_balance(customer.id)
        assert balance["current_balance"] == Decimal("2500000")
        assert balance["available_credit"] == Decimal("7500000")


# ═══════════════════════════════════════════════════════════════════════════════
# CUSTOMER PAYMENTS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestPayments:

    def setup_method(self):
        self.service = PaymentService()

    def test_cash_settles_immediately(self, dispatched_order, customer):
        payment = self.service.record_payment(customer, "1000000", Payment.Method.CASH, order=dispatched_order)
        assert payment.status == Payment.Status.CONFIRMED
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("2000000")
        dispatched_order.refresh_from_db()
        assert dispatched_order.payment_status == Order.PaymentStatus.PARTIAL

    def test_transfer_waits_for_confirmation(self, dispatched_order, customer, accountant):
        payment = self.service.record_payment(customer, "3000000", Payment.Method.TRANSFER,
                                              order=dispatched_order, reference="TRF-0091")
        assert payment.status == Payment.Status.PENDING
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("3000000")

        self.service.confirm_payment(payment.id, Payment.Status.CONFIRMED, actor=accountant)
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("0")
        dispatched_order.refresh_from_db()
        assert dispatched_order.payment_status == Order.PaymentStatus.CONFIRMED

    def test_rejected_payment_leaves_balance(self, dispatched_order, customer):
        payment = self.service.record_payment(customer, "500000", Payment.Method.CHEQUE)
        self.service.confirm_payment(payment.id, Payment.Status.REJECTED)
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("3000000")

    def test_settled_payment_cannot_be_confirmed_twice(self, customer):
        payment = self.service.record_payment(customer, "1000", Payment.Method.POS)
        with pytest.raises(ConflictError) as exc:
            self.service.confirm_payment(payment.id, Payment.Status.CONFIRMED)
        assert exc.value.code == "payment_already_settled"

    def test_zero_amount_rejected(self, customer):
        with pytest.raises(ValidationError) as exc:
            self.service.record_payment(customer, "0", Payment.Method.CASH)
        assert exc.value.code == "invalid_amount"

    def test_order_of_other_customer_rejected(self, make_order):
        other = Customer.objects.create(name="Other Co", credit_limit=Decimal("1000000"))
        with pytest.raises(ValidationError) as exc:
            self.service.record_payment(other, "1000", Payment.Method.CASH, order=make_order())
        assert exc.value.code == "customer_mismatch"

    def test_payment_api_requires_finance_role(self, auth_client, customer):
        resp = auth_client.post("/api/finance/payments/", {
            "customer": str(customer.id), "amount": "1000", "method": "cash",
        }, format="json")
        assert resp.status_code == 403

    def test_payment_api_flow(self, finance_client, dispatched_order, customer):
        resp = finance_client.post("/api/finance/payments/", {
            "customer": str(customer.id), "order": str(dispatched_order.id),
            "amount": "3000000", "method": "transfer", "reference": "TRF-7781",
        }, format="json")
        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["status"] == "Pending"

        resp = finance_client.post(f"/api/finance/payments/{resp.data['id']}/confirm/",
                                   {"status": "Confirmed"}, format="json")
        assert resp.status_code == 200
        assert resp.data["status"] == "Confirmed"
        assert resp.data["confirmed_by_name"] == "Accountant Ada"

        resp = finance_client.get(f"/api/customers/{customer.id}/balance/")
        assert Decimal(resp.data["current_balance"]) == Decimal("0")


# ═══════════════════════════════════════════════════════════════════════════════
# DRIVER WALLET
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDriverWallet:

    def test_balance_is_credits_minus_deductions(self, unit, dispatched_order):
        _, driver = unit
        wallet = DriverWalletService()
        wallet.record_transaction(driver, DriverTransaction.Type.ALLOWANCE, "15000")
        wallet.record_transaction(driver, DriverTransaction.Type.BONUS, "5000")
        wallet.record_transaction(driver, DriverTransaction.Type.SHORTAGE_DEDUCTION, "30000",
                                  order=dispatched_order)
        assert wallet.balance(driver) == Decimal("-10000")
        summary = wallet.summary(driver)
        assert summary["total_credits"] == Decimal("20000")
        assert summary["total_debits"] == Decimal("30000")

    def test_invalid_transactions_rejected(self, unit):
        _, driver = unit
        wallet = DriverWalletService()
        with pytest.raises(ValidationError):
            wallet.record_transaction(driver, DriverTransaction.Type.BONUS, "0")
        with pytest.raises(ValidationError) as exc:
            wallet.record_transaction(driver, "fine", "100")
        assert exc.value.code == "invalid_type"

    def test_functional_entrypoint(self, unit, dispatched_order):
        _, driver = unit
        tx = record_driver_wallet_transaction(driver.id, "deposit", "2500", order_id=dispatched_order.id)
        assert tx.order_id == dispatched_order.id
        with pytest.raises(ValidationError) as exc:
            record_driver_wallet_transaction(driver.id, "deposit", "2500",
                                             order_id="00000000-0000-0000-0000-000000000000")
        assert exc.value.code == "order_not_found"

    def test_wallet_api(self, finance_client, unit):
        _, driver = unit
        resp = finance_client.post(f"/api/fleet/drivers/{driver.id}/transactions/", {
            "type": "allowance", "amount": "15000", "description": "Kano-Abuja run",
        }, format="json")
        assert resp.status_code == 201
        resp = finance_client.get(f"/api/fleet/drivers/{driver.id}/wallet/")
        assert Decimal(resp.data["balance"]) == Decimal("15000")

    def test_dispatcher_cannot_post_wallet_lines(self, auth_client, unit):
        _, driver = unit
        resp = auth_client.post(f"/api/fleet/drivers/{driver.id}/transactions/",
                                {"type": "bonus", "amount": "100"}, format="json")
        assert resp.status_code == 403


# ═══════════════════════════════════════════════════════════════════════════════
# PROCUREMENT — supplier payments and manufacturer wallet
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestProcurement:

    def setup_method(self):
        self.service = ProcurementService()

    def test_prepayment_funds_wallet(self, supplier):
        payment = self.service.record_supplier_payment(
            supplier, "4500000", SupplierPayment.PaymentType.PREPAYMENT,
            cement_type="Dangote 42.5R", reference="DCP-2201",
        )
        wallet = ManufacturerWallet.objects.get(supplier=supplier, cement_type="Dangote 42.5R")
        assert payment.wallet_id == wallet.id
        assert wallet.balance == Decimal("4500000")
        assert wallet.transactions.get().type == WalletTransaction.Type.DEPOSIT

    def test_postpayment_leaves_wallet_alone(self, supplier):
        self.service.record_supplier_payment(supplier, "100000", SupplierPayment.PaymentType.POSTPAYMENT)
        assert not ManufacturerWallet.objects.exists()

    def test_purchase_draws_down_wallet(self, supplier):
        self.service.record_supplier_payment(supplier, "4500000", SupplierPayment.PaymentType.PREPAYMENT,
                                             cement_type="42.5R")
        purchase = self.service.create_purchase(supplier, "42.5R", Decimal("600"), Decimal("4500"),
                                                draw_from_wallet=True)
        assert purchase.purchase_number.startswith("PO-")
        assert purchase.total_cost == Decimal("2700000")
        wallet = ManufacturerWallet.objects.get(supplier=supplier)
        assert wallet.balance == Decimal("1800000")

    def test_insufficient_wallet_rolls_back(self, supplier):
        with pytest.raises(PreconditionError) as exc:
            self.service.create_purchase(supplier, "42.5R", Decimal("600"), Decimal("4500"),
                                         draw_from_wallet=True)
        assert exc.value.code == "insufficient_wallet_balance"
        assert not Purchase.objects.exists()

    def test_cancel_refunds_wallet(self, supplier):
        self.service.record_supplier_payment(supplier, "2700000", SupplierPayment.PaymentType.PREPAYMENT,
                                             cement_type="42.5R")
        purchase = self.service.create_purchase(supplier, "42.5R", Decimal("600"), Decimal("4500"),
                                                draw_from_wallet=True)
        self.service.set_purchase_status(purchase, Purchase.Status.CANCELLED)
        assert ManufacturerWallet.objects.get(supplier=supplier).balance == Decimal("2700000")
        with pytest.raises(ConflictError):
            self.service.set_purchase_status(purchase, Purchase.Status.RECEIVED)

    def test_prepayment_api_requires_cement_type(self, finance_client, supplier):
        resp = finance_client.post("/api/finance/supplier-payments/", {
            "supplier": str(supplier.id), "amount": "100000", "payment_type": "prepayment",
        }, format="json")
        assert resp.status_code == 400
        assert "cement_type" in resp.data


# ═══════════════════════════════════════════════════════════════════════════════
# TRIP PROFITABILITY
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestTripProfitability:

    def test_revenue_minus_expenses(self, make_order):
        order = make_order(quantity="100", price="5000", transport_cost=Decimal("100000"))
        report = trip_profitability(order)
        assert report["revenue"] == Decimal("500000")
        assert report["total_expenses"] == Decimal("100000")
        assert report["net_profit"] == Decimal("400000")
        assert report["profit_margin_percent"] == Decimal("80.00")

    def test_endpoint(self, auth_client, make_order):
        order = make_order(transport_cost=Decimal("45000"))
        resp = auth_client.get(f"/api/finance/trips/{order.id}/profitability/")
        assert resp.status_code == 200
        assert resp.data["order_number"] == order.order_number


# ═══════════════════════════════════════════════════════════════════════════════
# DOCUMENTS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDocuments:

    def test_statement_running_balance(self):
        from apps.documents.generators import statement_lines
        entries = [
            {"date": date(2026, 3, 1),  "description": "Order A", "debit": Decimal("500"), "credit": Decimal("0")},
            {"date": date(2026, 3, 5),  "description": "Payment", "debit": Decimal("0"),   "credit": Decimal("200")},
            {"date": date(2026, 3, 10), "description": "Order B", "debit": Decimal("300"), "credit": Decimal("0")},
            {"date": date(2026, 4, 1),  "description": "Order C", "debit": Decimal("999"), "credit": Decimal("0")},
        ]
        opening, lines, closing = statement_lines(entries, date_from=date(2026, 3, 2), date_to=date(2026, 3, 31))
        assert opening == Decimal("500")
        assert [l["balance"] for l in lines] == [Decimal("300"), Decimal("600")]
        assert closing == Decimal("600")

    def test_gate_pass_numbered_once(self, auth_client, dispatched_order):
        resp = auth_client.get(f"/api/documents/orders/{dispatched_order.id}/gate-pass/")
        assert resp.status_code == 200
        assert resp["Content-Type"].startswith("text/html")
        dispatched_order.refresh_from_db()
        number = dispatched_order.gate_pass_number
        assert number.startswith("GP-")
        assert number in resp.content.decode()

        auth_client.get(f"/api/documents/orders/{dispatched_order.id}/gate-pass/")
        dispatched_order.refresh_from_db()
        assert dispatched_order.gate_pass_number == number

    def test_loading_manifest_and_waybill(self, auth_client, dispatched_order, unit):
        truck, _ = unit
        resp = auth_client.get(f"/api/documents/orders/{dispatched_order.id}/loading-manifest/")
        assert resp.status_code == 200
        assert dispatched_order.order_number in resp.content.decode()
        resp = auth_client.get(f"/api/documents/orders/{dispatched_order.id}/waybill/")
        assert truck.plate_number in resp.content.decode()

    def test_invoice_html_and_pdf(self, auth_client, dispatched_order, customer):
        resp = auth_client.get(f"/api/documents/orders/{dispatched_order.id}/invoice/")
        assert customer.name in resp.content.decode()

        resp = auth_client.get(f"/api/documents/orders/{dispatched_order.id}/invoice/", {"output": "pdf"})
        assert resp.status_code == 200
        assert resp["Content-Type"] == "application/pdf"
        assert resp.content.startswith(b"%PDF")

    def test_no_pdf_for_gate_pass(self, auth_client, dispatched_order):
        resp = auth_client.get(f"/api/documents/orders/{dispatched_order.id}/gate-pass/", {"output": "pdf"})
        assert resp.status_code == 400

    def test_unknown_document_kind(self, auth_client, dispatched_order):
        resp = auth_client.get(f"/api/documents/orders/{dispatched_order.id}/bill-of-lading/")
        assert resp.status_code == 404

    def test_receipt_pdf(self, auth_client, customer):
        payment = PaymentService().record_payment(customer, "250000", Payment.Method.CASH, reference="RC-101")
        resp = auth_client.get(f"/api/documents/payments/{payment.id}/receipt/", {"output": "pdf"})
        assert resp.status_code == 200
        assert resp.content.startswith(b"%PDF")
        resp = auth_client.get(f"/api/documents/payments/{payment.id}/receipt/")
        assert "RC-101" in resp.content.decode()

    def test_statement_lists_orders_and_credits(self, auth_client, dispatched_order, customer):
        ReconciliationEngine().submit(dispatched_order.id, dispatched_order.delivery_otp,
                                      qty_good=590, qty_missing=10, reason="Torn bags")
        resp = auth_client.get(f"/api/documents/customers/{customer.id}/statement/")
        assert resp.status_code == 200
        body = resp.content.decode()
        assert customer.name in body
        assert dispatched_order.order_number in body
        assert "Credit note" in body
        assert "(OWING)" in body


# ═══════════════════════════════════════════════════════════════════════════════
# NOTIFICATIONS — SMS gateway and Celery tasks
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestNotifications:

    def test_otp_sms_sent_for_dispatched_order(self, dispatched_order, customer):
        from apps.notifications.tasks import send_delivery_otp
        with patch("apps.notifications.service.requests.post") as post:
            post.return_value = MagicMock(status_code=200)
            assert send_delivery_otp(str(dispatched_order.id)) is True
        payload = post.call_args.kwargs["json"]
        assert payload["phone"] == customer.phone
        assert dispatched_order.delivery_otp in payload["message"]

    def test_otp_sms_skipped_before_dispatch(self, make_order):
        from apps.notifications.tasks import send_delivery_otp
        with patch("apps.notifications.service.requests.post") as post:
            assert send_delivery_otp(str(make_order().id)) is False
        post.assert_not_called()

    def test_gateway_timeout_handled_gracefully(self, dispatched_order):
        from apps.notifications.tasks import send_delivery_otp
        with patch("apps.notifications.service.requests.post", side_effect=requests.Timeout("gateway slow")):
            assert send_delivery_otp(str(dispatched_order.id)) is False

    def test_expiring_documents_alert(self, make_unit, manager):
        from apps.notifications.tasks import notify_expiring_documents
        truck, driver = make_unit()
        today = timezone.localdate()
        ComplianceDocument.objects.create(entity_type="truck", entity_id=truck.id,
                                          document_type="insurance", expiry_date=today + timedelta(days=5))
        ComplianceDocument.objects.create(entity_type="driver", entity_id=driver.id,
                                          document_type="license", expiry_date=today - timedelta(days=1))
        ComplianceDocument.objects.create(entity_type="truck", entity_id=truck.id,
                                          document_type="road_worthiness", expiry_date=today + timedelta(days=200))
        with patch("apps.notifications.service.NotificationService.send_sms", return_value=True) as sms:
            assert notify_expiring_documents() == 2
        sms.assert_called_once()
        assert "EXPIRED" in sms.call_args[0][1]

    def test_broadcast_manager_only(self, auth_client):
        resp = auth_client.post("/api/notifications/broadcast/", {"message": "Depot closed"}, format="json")
        assert resp.status_code == 403

    def test_manager_broadcast_reaches_drivers(self, manager_client, unit):
        with patch("apps.notifications.service.NotificationService.send_sms", return_value=True):
            resp = manager_client.post("/api/notifications/broadcast/",
                                       {"message": "Depot closed at 4pm"}, format="json")
        assert resp.status_code == 200
        assert resp.data["sent_to"] == 1


# ═══════════════════════════════════════════════════════════════════════════════
# REALTIME — order feed broadcast
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestOrderFeed:

    def test_broadcast_payload(self):
        from apps.realtime.signals import broadcast_order_change
        sender = MagicMock()
        with patch("apps.realtime.signals.async_to_sync", return_value=sender):
            assert broadcast_order_change("updated", "abc", "ORD-TEST0001", "dispatched") is True
        group, message = sender.call_args[0]
        assert group == "orders"
        assert message["type"] == "order.changed"
        assert message["status"] == "dispatched"

    def test_dead_channel_layer_is_logged_not_raised(self):
        from apps.realtime.signals import broadcast_order_change
        with patch("apps.realtime.signals.async_to_sync", return_value=MagicMock(side_effect=OSError("redis down"))):
            assert broadcast_order_change("created", "abc", "ORD-TEST0001", "requested") is False

    def test_order_save_broadcasts_after_commit(self, make_order, django_capture_on_commit_callbacks):
        with patch("apps.realtime.signals.broadcast_order_change") as broadcast:
            with django_capture_on_commit_callbacks(execute=True):
                order = make_order()
        events = [c.args[0] for c in broadcast.call_args_list]
        assert "created" in events
        assert broadcast.call_args_list[0].args[2] == order.order_number


# ═══════════════════════════════════════════════════════════════════════════════
# ANALYTICS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestAnalytics:

    def test_dual_stream_requires_report_role(self, auth_client):
        assert auth_client.get("/api/analytics/dual-stream/").status_code == 403

    def test_dual_stream_split(self, finance_client, make_order, controller, unit):
        truck, driver = unit
        order = make_order(quantity="100", price="5000", cement_purchase_price=Decimal("4500"),
                           total_amount=Decimal("600000"))
        controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
        resp = finance_client.get("/api/analytics/dual-stream/")
        assert resp.status_code == 200
        row = resp.data["results"][0]
        assert row["trading_profit"] == Decimal("50000")
        assert row["haulage_revenue"] == Decimal("100000")
        assert row["haulage_costs"] == Decimal("100000")
        assert resp.data["totals"]["net_profit"] == Decimal("50000")

    def test_customer_aging(self, finance_client, dispatched_order, customer):
        resp = finance_client.get("/api/analytics/customers/aging/")
        assert resp.status_code == 200
        assert resp.data[0]["name"] == customer.name
        assert resp.data[0]["current_0_30"] == Decimal("3000000")

    def test_fleet_status(self, auth_client, dispatched_order, make_unit):
        make_unit(plate="ZZ-IDLE-01", driver_name="Idle Ibrahim")
        resp = auth_client.get("/api/analytics/fleet/status/")
        states = {row["plate_number"]: row["status"] for row in resp.data}
        assert states == {"T1-KAN-001": "on_trip", "ZZ-IDLE-01": "available"}

    def test_pending_deliveries(self, auth_client, dispatched_order):
        resp = auth_client.get("/api/analytics/deliveries/pending/")
        assert [r["order_number"] for r in resp.data] == [dispatched_order.order_number]

    def test_expiring_documents(self, auth_client, make_unit):
        truck, _ = make_unit()
        ComplianceDocument.objects.create(entity_type="truck", entity_id=truck.id, document_type="insurance",
                                          expiry_date=timezone.localdate())
        resp = auth_client.get("/api/analytics/documents/expiring/")
        assert resp.data[0]["entity_name"] == truck.plate_number
        assert resp.data[0]["is_expired"] is True


# ═══════════════════════════════════════════════════════════════════════════════
# OPS — health, metrics, dashboard
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestOpsEndpoints:

    def test_liveness_without_auth(self, api_client):
        resp = api_client.get("/api/health/live/")
        assert resp.status_code == 200
        assert resp.data["status"] == "ok"

    def test_deep_health_reports_checks(self, api_client):
        resp = api_client.get("/api/health/deep/")
        assert resp.status_code in (200, 503)
        assert resp.data["checks"]["database"] == "ok"
        assert resp.data["checks"]["cache"] == "ok"

    def test_prometheus_metrics(self, auth_client, dispatched_order):
        resp = auth_client.get("/api/ops/metrics/")
        assert resp.status_code == 200
        body = resp.content.decode()
        assert 'cementops_orders_total{status="dispatched"} 1' in body
        assert "cementops_fleet_reservations_active 1" in body

    def test_dashboard_requires_report_role(self, auth_client):
        assert auth_client.get("/api/admin/dashboard/summary/").status_code == 403

    def test_dashboard_summary(self, manager_client, dispatched_order):
        resp = manager_client.get("/api/admin/dashboard/summary/")
        assert resp.status_code == 200
        assert resp.data["trucks_on_trip"] == 1
        assert resp.data["orders_by_status"]["dispatched"] == 1
        assert Decimal(resp.data["total_receivables_ngn"]) == Decimal("3000000")


# ═══════════════════════════════════════════════════════════════════════════════
# MASTER DATA — customers and fleet
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestMasterData:

    def test_balance_is_read_only_over_api(self, auth_client, customer):
        resp = auth_client.patch(f"/api/customers/{customer.id}/", {"current_balance": "1"}, format="json")
        assert resp.status_code == 200
        customer.refresh_from_db()
        assert customer.current_balance == Decimal("0")

    def test_accountant_blocks_customer(self, finance_client, customer):
        resp = finance_client.post(f"/api/customers/{customer.id}/block/", {"is_blocked": True}, format="json")
        assert resp.status_code == 200
        assert resp.data["is_blocked"] is True

    def test_available_units_endpoint(self, auth_client, dispatched_order, make_unit):
        make_unit(plate="FREE-001", driver_name="Free Fatima")
        resp = auth_client.get("/api/fleet/available/")
        assert [u["plate_number"] for u in resp.data] == ["FREE-001"]
        assert resp.data[0]["driver"]["name"] == "Free Fatima"

    def test_document_expiry_before_issue_rejected(self, auth_client, unit):
        truck, _ = unit
        resp = auth_client.post("/api/fleet/documents/", {
            "entity_type": "truck", "entity_id": str(truck.id), "document_type": "insurance",
            "issue_date": "2026-05-01", "expiry_date": "2026-04-01",
        }, format="json")
        assert resp.status_code == 400
        assert "expiry_date" in resp.data

    def test_document_for_unknown_entity_rejected(self, auth_client):
        resp = auth_client.post("/api/fleet/documents/", {
            "entity_type": "driver", "entity_id": "00000000-0000-0000-0000-000000000000",
            "document_type": "license", "expiry_date": "2027-01-01",
        }, format="json")
        assert resp.status_code == 400
