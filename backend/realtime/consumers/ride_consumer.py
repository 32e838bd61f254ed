"""Ride tracking WebSocket consumer for real-time ride updates."""

import logging
from typing import Dict, Any, Optional

from channels.db import database_sync_to_async

from .base import BaseConsumer

logger = logging.getLogger(__name__)


class RideConsumer(BaseConsumer):
    """
    WebSocket consumer for one ride: ws/rides/<ride_id>/

    Used by the ride's provider and its booked riders to receive ride status
    updates (started, completed, cancelled) and the provider's live location.
    Updates are pushed by the ride services; clients may only ask for the
    current snapshot.
    """

    async def can_connect(self) -> bool:
        self.ride_id = self.scope["url_route"]["kwargs"]["ride_id"]
        allowed = await self._is_ride_participant(self.ride_id)
        if not allowed:
            logger.info("User %s refused on ride %s socket", self.user_id, self.ride_id)
        return allowed

    async def on_connect(self):
        self.ride_group = f"ride_{self.ride_id}"
        await self._join_group(self.ride_group)

        await self.send_json({
            "type": "connection_established",
            "user_id": self.user_id,
            "role": self.role,
            "ride": await self._ride_snapshot(),
        })

    async def handle_message(self, msg_type: str, data: Dict[str, Any]):
        if msg_type == "ping":
            await self.send_json({"type": "pong"})
        elif msg_type == "get_status":
            await self.send_json({"type": "ride_status", "ride": await self._ride_snapshot()})
        else:
            await self.send_error(f"Unknown message type: {msg_type}")

    # ---------------------- Database Helpers ----------------------

    @database_sync_to_async
    def _is_ride_participant(self, ride_id) -> bool:
        """The provider, or a rider holding a booking on this ride."""
        from rides.models import Ride
        ride = Ride.objects.filter(id=ride_id).first()
        if ride is None:
            return False
        if ride.provider_id == self.user_id:
            return True
        return ride.bookings.filter(rider_id=self.user_id).exists()

    @database_sync_to_async
    def _ride_snapshot(self) -> Optional[Dict[str, Any]]:
        from rides.models import Ride
        ride = Ride.objects.filter(id=self.ride_id).first()
        if ride is None:
            return None
        return {
            "id": ride.id,
            "status": ride.status,
            "live_location": ride.live_location,
        }
