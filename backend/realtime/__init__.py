"""
Realtime app for WebSocket ride events.

This app provides:
- A WebSocket consumer per ride for its provider and booked riders
- Notification helpers used by the ride services
- JWT authentication middleware for WebSocket connections

Key Components:
    - consumers/: WebSocket consumers (base, ride)
    - notifications.py: ride and user event helpers
    - middleware.py: access token from the query string
    - routing.py: ws/rides/<ride_id>/

Usage:
    from realtime.consumers import RideConsumer
    from realtime.notifications import notify_ride_event, notify_user_event
"""
