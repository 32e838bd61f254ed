"""WebSocket URL routing for the realtime app."""

from django.urls import re_path

from .consumers.ride_consumer import RideConsumer

websocket_urlpatterns = [
    # Ride events for the provider and booked riders
    # URL: ws://localhost:8000/ws/rides/<ride_id>/?token=<access>
    re_path(
        r"ws/rides/(?P<ride_id>\d+)/$",
        RideConsumer.as_asgi(),
        name="ride-ws"
    ),
]
