"""Broadcast order changes to the feed once the writing transaction commits."""

import logging
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.orders.models import Order
from .consumers import ORDERS_GROUP

logger = logging.getLogger("cementops.realtime")


def broadcast_order_change(event: str, order_id, order_number: str, status: str):
    """Push to the orders group. A dead channel layer is logged, never raised."""
    layer = get_channel_layer()
    if layer is None:
        return False
    try:
        async_to_sync(layer.group_send)(ORDERS_GROUP, {
            "type":         "order.changed",
            "event":        event,
            "order_id":     str(order_id),
            "order_number": order_number,
            "status":       status,
        })
    except Exception as exc:
        logger.warning("Order feed broadcast failed for %s: %s", order_number, exc)
        return False
    return True


@receiver(post_save, sender=Order)
def order_saved(sender, instance, created, **kwargs):
    event = "created" if created else "updated"
    order_id, number, status = instance.id, instance.order_number, instance.status
    transaction.on_commit(lambda: broadcast_order_change(event, order_id, number, status))


@receiver(post_delete, sender=Order)
def order_deleted(sender, instance, **kwargs):
    order_id, number, status = instance.id, instance.order_number, instance.status
    transaction.on_commit(lambda: broadcast_order_change("deleted", order_id, number, status))
