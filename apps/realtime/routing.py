"""WebSocket URL routing for the order feed."""
from django.urls import re_path
from .consumers import OrderFeedConsumer

websocket_urlpatterns = [
    re_path(r"^ws/orders/$", OrderFeedConsumer.as_asgi()),
]
