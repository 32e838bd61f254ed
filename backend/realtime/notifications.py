"""
Notification helpers for sending WebSocket messages to connected clients.

This module provides functions to:
- Send ride events to everyone tracking a ride: ride_<ride_id>
- Send targeted events to one user: user_<user_id>

Sending is best-effort. A missing or failing channel layer is logged and
never propagated to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def _group_send(group: str, payload: Dict[str, Any]) -> bool:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return False

    try:
        async_to_sync(channel_layer.group_send)(group, payload)
    except Exception:
        logger.exception("Failed to send %s to %s", payload.get("event"), group)
        return False

    logger.debug("WS -> %s: %s", group, payload)
    return True


def notify_ride_event(
    ride,
    event_type: str,
    message: str = "",
    extra: Dict[str, Any] = None,
) -> bool:
    """
    Send a ride event to the ride group: ride_<ride_id>

    Args:
        ride: Ride model instance
        event_type: ride_started, ride_completed, ride_cancelled, ride_location
        message: Optional message to include
        extra: Additional payload data

    Returns:
        True if sent successfully, False otherwise
    """
    payload = {
        "type": "ride_event",
        "event": event_type,
        "ride_id": ride.id,
        "status": ride.status,
        **(extra or {}),
    }
    if message:
        payload["message"] = message

    return _group_send(f"ride_{ride.id}", payload)


def notify_user_event(
    user_id: int | None,
    event_type: str,
    ride_id: int,
    message: str = "",
    extra: Dict[str, Any] = None,
) -> bool:
    """
    Send a ride-related event to one user through: user_<user_id>

    Args:
        user_id: Target user's ID
        event_type: ride_booked, booking_cancelled, pickup_confirmed, ride_deleted
        ride_id: The ride the event is about
        message: Optional message to include
        extra: Additional payload data
    """
    if not user_id:
        return False

    payload = {
        "type": "user_event",
        "event": event_type,
        "ride_id": ride_id,
        **(extra or {}),
    }
    if message:
        payload["message"] = message

    return _group_send(f"user_{user_id}", payload)
