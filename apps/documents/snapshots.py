"""
Read-side snapshots fed to the document generators.

The generators never touch the database; these helpers gather everything a
printout needs into plain dicts.
"""

from decimal import Decimal

from django.conf import settings
from django.utils import timezone

from apps.finance.models import Payment
from apps.orders.models import CreditNote, Order


def company() -> dict:
    return {
        "name":     settings.COMPANY_NAME,
        "address":  getattr(settings, "COMPANY_ADDRESS", ""),
        "phone":    getattr(settings, "COMPANY_PHONE", ""),
        "currency": getattr(settings, "CURRENCY_SYMBOL", "₦"),
    }


def order_snapshot(order: Order) -> dict:
    customer, truck, driver, depot = order.customer, order.truck, order.driver, order.depot
    payment = (
        order.payments.filter(status=Payment.Status.CONFIRMED).order_by("-confirmed_at").first()
        if order.payment_status == Order.PaymentStatus.CONFIRMED else None
    )
    return {
        "order_number":            order.order_number,
        "order_type":              order.get_order_type_display(),
        "date":                    timezone.localtime(order.dispatched_at or order.created_at).date(),
        "atc_number":              order.atc_number,
        "cap_number":              order.cap_number,
        "gate_pass_number":        order.gate_pass_number,
        "loading_manifest_number": order.loading_manifest_number,
        "waybill_number":          order.waybill_number or order.order_number,
        "delivery_otp":            order.delivery_otp,
        "cement_type":             order.cement_type,
        "quantity":                order.quantity,
        "unit":                    order.get_unit_display(),
        "unit_price":              order.unit_price,
        "total_amount":            order.total_amount,
        "payment_status":          order.payment_status,
        "payment_method":          payment.get_method_display() if payment else "",
        "payment_reference":       payment.reference if payment else "",
        "delivery_address":        order.delivery_address or customer.address,
        "depot_name":              depot.name if depot else (order.supplier.name if order.supplier_id else ""),
        "customer": {
            "name":    customer.name,
            "phone":   customer.phone,
            "email":   customer.email,
            "address": customer.address,
        },
        "driver": {
            "name":           driver.name if driver else "",
            "phone":          driver.phone if driver else "",
            "license_number": driver.license_number if driver else "",
        },
        "truck": {
            "plate_number":  truck.plate_number if truck else "",
            "model":         truck.model if truck else "",
            "capacity_tons": truck.capacity_tons if truck else None,
        },
    }


def payment_snapshot(payment: Payment) -> dict:
    return {
        "receipt_number": payment.reference or str(payment.id)[:8].upper(),
        "date":           payment.payment_date,
        "amount":         payment.amount,
        "method":         payment.get_method_display(),
        "reference":      payment.reference,
        "status":         payment.status,
        "order_number":   payment.order.order_number if payment.order_id else "",
        "customer": {
            "name":  payment.customer.name,
            "phone": payment.customer.phone,
        },
    }


def statement_snapshot(customer, date_from=None, date_to=None) -> dict:
    """Debits are dispatched orders; credits are confirmed payments and applied credit notes."""
    orders = Order.objects.filter(customer=customer, dispatched_at__isnull=False)
    payments = Payment.objects.filter(customer=customer, status=Payment.Status.CONFIRMED)
    notes = CreditNote.objects.filter(customer=customer, status=CreditNote.Status.APPLIED)

    entries = []
    for o in orders:
        entries.append({
            "date":        timezone.localtime(o.dispatched_at).date(),
            "description": f"Order {o.order_number}: {o.quantity} {o.unit} {o.cement_type}",
            "debit":       o.total_amount,
            "credit":      Decimal("0"),
        })
    for p in payments:
        entries.append({
            "date":        p.payment_date,
            "description": f"Payment ({p.get_method_display()}) {p.reference}".strip(),
            "debit":       Decimal("0"),
            "credit":      p.amount,
        })
    for n in notes:
        entries.append({
            "date":        timezone.localtime(n.created_at).date(),
            "description": f"Credit note: {n.reason}"[:120],
            "debit":       Decimal("0"),
            "credit":      n.amount,
        })

    return {
        "customer": {
            "name":    customer.name,
            "phone":   customer.phone,
            "email":   customer.email,
            "address": customer.address,
        },
        "credit_limit":    customer.credit_limit,
        "current_balance": customer.current_balance,
        "date_from":       date_from,
        "date_to":         date_to,
        "generated":       timezone.localdate(),
        "entries":         entries,
    }
