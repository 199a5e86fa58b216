"""
Financial ledger services.

Customer balance is the running receivable. It moves in exactly three places,
each inside the transaction that causes it:
  + dispatch posts the order total          (apps.orders.service)
  - a confirmed payment reduces it          (PaymentService.confirm_payment)
  - a credit note for short delivery        (apps.orders.reconciliation)
"""

import logging
import random
import string
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import F, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone

from apps.customers.models import Customer
from apps.finance.models import ManufacturerWallet, Payment, Purchase, SupplierPayment, WalletTransaction
from apps.orders.exceptions import ConflictError, PreconditionError, ValidationError
from apps.orders.models import Order

logger = logging.getLogger("cementops.finance")


# ── Clearance ─────────────────────────────────────────────────────────────────
def is_financially_cleared(order, customer, fail_open=None) -> bool:
    """
    Dispatch gate: paid orders always clear; otherwise the order must fit in
    the customer's remaining credit. A missing customer fails closed unless
    CREDIT_CLEARANCE_FAIL_OPEN is set.
    """
    if order.payment_status == Order.PaymentStatus.CONFIRMED:
        return True
    if customer is None:
        if fail_open is None:
            fail_open = getattr(settings, "CREDIT_CLEARANCE_FAIL_OPEN", False)
        return bool(fail_open)
    return customer.current_balance + order.total_amount <= customer.credit_limit


def get_customer_balance(customer_id) -> dict:
    customer = get_object_or_404(Customer, pk=customer_id)
    return {
        "customer_id":      customer.id,
        "current_balance":  customer.current_balance,
        "credit_limit":     customer.credit_limit,
        "available_credit": customer.available_credit,
    }


def adjust_customer_balance(customer_id, delta: Decimal):
    """Atomic increment; callers hold the surrounding transaction."""
    Customer.objects.filter(pk=customer_id).update(
        current_balance=F("current_balance") + delta,
        updated_at=timezone.now(),
    )


def _generate_reference(prefix: str) -> str:
    chars = string.ascii_uppercase + string.digits
    return f"{prefix}-{''.join(random.choices(chars, k=8))}"


# ── Customer payments ─────────────────────────────────────────────────────────
class PaymentService:
    """Record and settle customer payments. Cash and POS settle immediately."""

    @transaction.atomic
    def record_payment(self, customer, amount, method, order=None, actor=None, **extra) -> Payment:
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValidationError("Payment amount must be greater than zero.", code="invalid_amount")
        if order is not None and order.customer_id != customer.id:
            raise ValidationError("Order does not belong to this customer.", code="customer_mismatch")

        payment = Payment.objects.create(
            customer=customer, order=order, amount=amount, method=method,
            recorded_by=actor, **extra,
        )
        logger.info("Payment %s recorded: %s %s for %s", payment.id, method, amount, customer.name)

        if method in Payment.AUTO_CONFIRMED_METHODS:
            payment = self._settle(payment, Payment.Status.CONFIRMED, actor)
        return payment

    @transaction.atomic
    def confirm_payment(self, payment_id, status, actor=None) -> Payment:
        """Move a Pending payment to Confirmed or Rejected. Anything else is a conflict."""
        if status not in (Payment.Status.CONFIRMED, Payment.Status.REJECTED):
            raise ValidationError("Status must be Confirmed or Rejected.", code="invalid_status")

        payment = get_object_or_404(Payment.objects.select_for_update(), pk=payment_id)
        if payment.status != Payment.Status.PENDING:
            raise ConflictError(f"Payment is already {payment.status}.", code="payment_already_settled")
        return self._settle(payment, status, actor)

    def _settle(self, payment, status, actor):
        payment.status       = status
        payment.confirmed_by = actor
        payment.confirmed_at = timezone.now()
        payment.save(update_fields=["status", "confirmed_by", "confirmed_at", "updated_at"])

        if status == Payment.Status.CONFIRMED:
            adjust_customer_balance(payment.customer_id, -payment.amount)
            if payment.order_id:
                self.refresh_order_payment_status(payment.order_id)

        logger.info("Payment %s %s (%s)", payment.id, status, payment.amount)
        return payment

    @staticmethod
    def refresh_order_payment_status(order_id):
        order = Order.objects.get(pk=order_id)
        paid = (
            Payment.objects
            .filter(order_id=order_id, status=Payment.Status.CONFIRMED)
            .aggregate(t=Sum("amount"))["t"] or Decimal("0")
        )
        if paid >= order.total_amount:
            new_status = Order.PaymentStatus.CONFIRMED
        elif paid > 0:
            new_status = Order.PaymentStatus.PARTIAL
        else:
            new_status = Order.PaymentStatus.PENDING
        Order.objects.filter(pk=order_id).update(payment_status=new_status, updated_at=timezone.now())
        return new_status


def confirm_payment(payment_id, status, actor=None) -> Payment:
    return PaymentService().confirm_payment(payment_id, status, actor=actor)


# ── Supplier side ─────────────────────────────────────────────────────────────
class ProcurementService:
    """Supplier payments, manufacturer wallet and purchase orders."""

    @transaction.atomic
    def record_supplier_payment(self, supplier, amount, payment_type, cement_type="", **extra) -> SupplierPayment:
        amount = Decimal(str(amount))
        payment = SupplierPayment.objects.create(
            supplier=supplier, amount=amount, payment_type=payment_type,
            cement_type=cement_type, **extra,
        )
        if payment_type == SupplierPayment.PaymentType.PREPAYMENT and cement_type:
            wallet, created = ManufacturerWallet.objects.get_or_create(
                supplier=supplier, cement_type=cement_type,
            )
            if created:
                logger.info("Opened manufacturer wallet %s / %s", supplier.name, cement_type)
            self._post_wallet(wallet, WalletTransaction.Type.DEPOSIT, amount,
                              f"Prepayment: {payment.reference or 'Ref N/A'}")
            payment.wallet = wallet
            payment.save(update_fields=["wallet"])
        return payment

    @transaction.atomic
    def create_purchase(self, supplier, cement_type, quantity, cost_per_unit, draw_from_wallet=False,
                        **extra) -> Purchase:
        purchase_number = _generate_reference("PO")
        while Purchase.objects.filter(purchase_number=purchase_number).exists():
            purchase_number = _generate_reference("PO")

        purchase = Purchase.objects.create(
            purchase_number=purchase_number, supplier=supplier, cement_type=cement_type,
            quantity=quantity, cost_per_unit=cost_per_unit, **extra,
        )
        if draw_from_wallet:
            wallet = (
                ManufacturerWallet.objects.select_for_update()
                .filter(supplier=supplier, cement_type=cement_type)
                .first()
            )
            if wallet is None or wallet.balance < purchase.total_cost:
                available = wallet.balance if wallet else Decimal("0")
                raise PreconditionError(
                    f"Insufficient prepayment balance with {supplier.name} for {cement_type}: "
                    f"{available} available, {purchase.total_cost} required.",
                    code="insufficient_wallet_balance",
                )
            self._post_wallet(wallet, WalletTransaction.Type.WITHDRAWAL, purchase.total_cost,
                              f"Purchase {purchase.purchase_number}", order=purchase.sales_order)
            purchase.wallet = wallet
            purchase.save(update_fields=["wallet"])

        logger.info("Purchase %s created: %s %s %s", purchase.purchase_number,
                    quantity, purchase.unit, cement_type)
        return purchase

    @transaction.atomic
    def set_purchase_status(self, purchase, status) -> Purchase:
        purchase = Purchase.objects.select_for_update().get(pk=purchase.pk)
        if purchase.status != Purchase.Status.ORDERED:
            raise ConflictError(f"Purchase is already {purchase.status}.", code="purchase_closed")
        if status == Purchase.Status.CANCELLED and purchase.wallet_id:
            self._post_wallet(purchase.wallet, WalletTransaction.Type.DEPOSIT, purchase.total_cost,
                              f"Refund: cancelled {purchase.purchase_number}")
        purchase.status = status
        purchase.save(update_fields=["status"])
        logger.info("Purchase %s → %s", purchase.purchase_number, status)
        return purchase

    @staticmethod
    def _post_wallet(wallet, tx_type, amount, description, order=None):
        signed = -amount if tx_type == WalletTransaction.Type.WITHDRAWAL else amount
        WalletTransaction.objects.create(
            wallet=wallet, type=tx_type, amount=amount, description=description, order=order,
        )
        ManufacturerWallet.objects.filter(pk=wallet.pk).update(
            balance=F("balance") + signed, updated_at=timezone.now(),
        )


# ── Reports ───────────────────────────────────────────────────────────────────
def trip_profitability(order) -> dict:
    expenses = order.expenses.aggregate(t=Sum("amount"))["t"] or Decimal("0")
    revenue  = order.total_amount
    net      = revenue - expenses
    return {
        "order_number":          order.order_number,
        "revenue":               revenue,
        "total_expenses":        expenses,
        "net_profit":            net,
        "profit_margin_percent": round(net / revenue * 100, 2) if revenue else Decimal("0"),
    }
