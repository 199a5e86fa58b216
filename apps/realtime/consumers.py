"""
Order feed over WebSocket.

Clients subscribe to ws/orders/ and receive {event, order_id, order_number,
status} whenever an order is saved or deleted, so dashboards can drop their
cached order lists without polling.
"""

import logging
from channels.generic.websocket import AsyncJsonWebsocketConsumer

logger = logging.getLogger("cementops.realtime")

ORDERS_GROUP = "orders"


class OrderFeedConsumer(AsyncJsonWebsocketConsumer):

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            await self.close(code=4401)
            return
        await self.channel_layer.group_add(ORDERS_GROUP, self.channel_name)
        await self.accept()
        logger.info("Order feed connected: %s", user.phone)

    async def disconnect(self, code):
        await self.channel_layer.group_discard(ORDERS_GROUP, self.channel_name)

    async def receive_json(self, content):
        # Read-only feed; the only client message is a keep-alive
        if content.get("type") == "ping":
            await self.send_json({"type": "pong"})

    async def order_changed(self, event):
        await self.send_json({**event, "type": "order.changed"})
