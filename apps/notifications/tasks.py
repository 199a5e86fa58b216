"""Celery tasks: delivery OTP SMS and compliance-document expiry alerts."""

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger("cementops.tasks")


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_delivery_otp(self, order_id: str):
    """Queued after a dispatch commits; retried while the gateway is down."""
    from apps.orders.models import Order
    from apps.notifications.service import NotificationService

    try:
        order = Order.objects.select_related("customer", "truck").get(id=order_id)
    except Order.DoesNotExist:
        logger.error("Order %s not found for OTP SMS", order_id)
        return False
    if order.status != Order.Status.DISPATCHED or not order.delivery_otp:
        logger.info("Skipping OTP SMS for %s (%s)", order.order_number, order.status)
        return False

    if NotificationService().send_delivery_otp(order):
        return True
    if self.request.called_directly or getattr(settings, "CELERY_TASK_ALWAYS_EAGER", False):
        return False
    raise self.retry()


@shared_task
def notify_expiring_documents():
    """
    Daily: alert managers about truck and driver documents expiring within
    DOCUMENT_EXPIRY_WARNING_DAYS. Returns the number of documents reported.
    """
    from apps.authentication.models import Agent
    from apps.fleet.models import ComplianceDocument, Driver, Truck
    from apps.notifications.service import NotificationService

    today   = timezone.localdate()
    horizon = today + timedelta(days=getattr(settings, "DOCUMENT_EXPIRY_WARNING_DAYS", 30))
    docs = list(ComplianceDocument.objects.filter(expiry_date__lte=horizon).order_by("expiry_date"))
    if not docs:
        logger.info("No compliance documents expiring before %s", horizon)
        return 0

    trucks  = dict(Truck.objects.filter(id__in=[d.entity_id for d in docs]).values_list("id", "plate_number"))
    drivers = dict(Driver.objects.filter(id__in=[d.entity_id for d in docs]).values_list("id", "name"))
    lines = []
    for d in docs:
        owner = trucks.get(d.entity_id) or drivers.get(d.entity_id) or str(d.entity_id)[:8]
        state = "EXPIRED" if d.is_expired(today) else f"expires {d.expiry_date:%d/%m}"
        lines.append(f"{owner} {d.get_document_type_display()} {state}")

    message = f"{len(docs)} fleet document(s) need renewal: " + "; ".join(lines[:5])
    if len(lines) > 5:
        message += f" (+{len(lines) - 5} more)"

    notifier = NotificationService()
    managers = Agent.objects.filter(role__in=("MANAGER", "ADMIN"), is_active=True)
    sent = sum(1 for m in managers if notifier.send_sms(m.phone, message))
    logger.warning("Document expiry alert: %d document(s), %d manager(s) notified", len(docs), sent)
    return len(docs)
