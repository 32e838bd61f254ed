"""
Ride management service - Core ride lifecycle operations.

This module handles:
    - Creating, listing and deleting provider rides
    - Starting, completing and cancelling rides
    - Pickup confirmation and live location
    - Browsing, searching and booking rides
"""

from .ride_lifecycle import (
    RideResult,
    TRANSITIONS,
    can_transition,
    generate_otp,
    create_ride,
    list_provider_rides,
    delete_ride,
    start_ride,
    confirm_pickup,
    complete_ride,
    cancel_ride,
    update_live_location,
    list_available_rides,
    search_rides,
    book_ride,
    cancel_booking,
    list_rider_bookings,
)

__all__ = [
    "RideResult",
    "TRANSITIONS",
    "can_transition",
    "generate_otp",
    # Provider operations
    "create_ride",
    "list_provider_rides",
    "delete_ride",
    "start_ride",
    "confirm_pickup",
    "complete_ride",
    "cancel_ride",
    "update_live_location",
    # Rider operations
    "list_available_rides",
    "search_rides",
    "book_ride",
    "cancel_booking",
    "list_rider_bookings",
]
