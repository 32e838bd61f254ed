"""
Core ride lifecycle operations.

Ride status moves created -> started -> completed, and may be canceled from
created or started. completed and canceled are terminal. Every operation
checks ownership and state before touching the database, and runs in one
transaction so it either fully applies or not at all.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from functools import partial
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from common.utils import validate_or_raise
from providers.models import ProviderProfile
from rides.models import Booking, Ride
from realtime.notifications import notify_ride_event, notify_user_event
from services.exceptions import (
    AlreadyBookedError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    ProfileIncompleteError,
)

logger = logging.getLogger(__name__)

TRANSITIONS = {
    'created': {'started', 'canceled'},
    'started': {'completed', 'canceled'},
    'completed': set(),
    'canceled': set(),
}

# Rides in these states can no longer be deleted by their provider
UNDELETABLE_STATUSES = ('started', 'completed')

ACTIVE_BOOKING_STATUSES = ('pending', 'accepted', 'in-ride')

ACTIVE_BOOKING_CONSTRAINT = 'unique_active_booking'


@dataclass
class RideResult:
    """Result object for ride operations."""
    ride: Optional[Ride]
    message: str = ""
    booking: Optional[Booking] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, set())


def generate_otp(length: Optional[int] = None) -> str:
    """Fixed-length numeric pickup code. Not guaranteed unique across bookings."""
    length = length or settings.RIDE_OTP_LENGTH
    return f"{secrets.randbelow(10 ** length):0{length}d}"


# ===================== Lookups =====================

def _get_ride(ride_id, for_update: bool = False) -> Ride:
    qs = Ride.objects.select_for_update() if for_update else Ride.objects
    try:
        return qs.get(id=ride_id)
    except Ride.DoesNotExist:
        raise NotFoundError("Ride not found")


def _get_owned_ride(ride_id, provider) -> Ride:
    ride = _get_ride(ride_id, for_update=True)
    if ride.provider_id != provider.id:
        raise ForbiddenError("You can only manage your own rides")
    return ride


def _is_duplicate_booking(error: IntegrityError) -> bool:
    """
    PostgreSQL names the violated constraint; SQLite only lists the indexed
    columns of a partial index.
    """
    message = str(error)
    if ACTIVE_BOOKING_CONSTRAINT in message:
        return True
    return 'UNIQUE constraint failed' in message and '.ride_id' in message and '.rider_id' in message


def _transition(ride: Ride, target: str, **timestamps):
    if not can_transition(ride.status, target):
        raise InvalidStateError(f"Cannot move ride from {ride.status} to {target}")

    previous = ride.status
    ride.status = target
    for name, value in timestamps.items():
        setattr(ride, name, value)
    ride.save(update_fields=['status', *timestamps.keys()])
    logger.info("Ride %s: %s -> %s", ride.id, previous, target)


# ===================== Provider Operations =====================

@transaction.atomic
def create_ride(provider, data) -> RideResult:
    """
    Create a ride for a provider.

    Args:
        provider: User model instance (must have role provider)
        data: start_point, destination, break_locations, start_time,
              end_time, ride_cost, women_only, optional vehicle_category

    Raises:
        ForbiddenError: caller is not a provider
        ProfileIncompleteError: provider has not submitted their details
        InvalidInputError: missing/invalid fields, non-positive cost,
                           end time not after start time
    """
    from rides.serializers import RideCreateSerializer

    if provider.role != 'provider':
        raise ForbiddenError("Only providers can create rides")

    try:
        profile = ProviderProfile.objects.get(user=provider)
    except ProviderProfile.DoesNotExist:
        raise ProfileIncompleteError()

    fields = dict(validate_or_raise(RideCreateSerializer(data=data)))
    fields.setdefault('vehicle_category', profile.vehicle_category)

    ride = Ride.objects.create(
        provider=provider,
        status='created',
        live_latitude=None,
        live_longitude=None,
        **fields,
    )

    logger.info("Ride %s created by provider %s", ride.id, provider.id)
    return RideResult(ride=ride, message="Ride created successfully")


def list_provider_rides(provider):
    """All rides of a provider, with each booking's rider loaded for display."""
    return (
        Ride.objects.filter(provider=provider)
        .select_related('provider')
        .prefetch_related('bookings__rider')
    )


@transaction.atomic
def delete_ride(ride_id, provider) -> RideResult:
    ride = _get_owned_ride(ride_id, provider)

    if ride.status in UNDELETABLE_STATUSES:
        raise InvalidStateError(f"Cannot delete a ride that is already {ride.status}")

    deleted_id = ride.id
    rider_ids = list(
        ride.bookings.filter(status__in=ACTIVE_BOOKING_STATUSES).values_list('rider_id', flat=True)
    )
    ride.delete()
    logger.info("Ride %s deleted by provider %s", deleted_id, provider.id)

    for rider_id in rider_ids:
        transaction.on_commit(partial(
            notify_user_event, rider_id, 'ride_deleted', deleted_id, 'The provider removed this ride.'
        ))

    return RideResult(ride=None, message="Ride deleted successfully", extra={'ride_id': deleted_id})


@transaction.atomic
def start_ride(ride_id, provider) -> RideResult:
    ride = _get_owned_ride(ride_id, provider)
    _transition(ride, 'started', started_at=timezone.now())

    transaction.on_commit(partial(notify_ride_event, ride, 'ride_started', 'Your ride has started.'))
    return RideResult(ride=ride, message="Ride started")


@transaction.atomic
def confirm_pickup(ride_id, provider, rider_id, otp: str) -> RideResult:
    """Provider checks the rider's OTP at pickup; the booking moves to in-ride."""
    ride = _get_owned_ride(ride_id, provider)

    if ride.status != 'started':
        raise InvalidStateError("Start the ride before confirming pickups")

    booking = ride.bookings.filter(rider_id=rider_id, status='accepted').first()
    if booking is None:
        raise NotFoundError("No accepted booking for this rider on this ride")

    if str(otp).strip() != booking.otp:
        raise InvalidInputError("Invalid OTP")

    booking.status = 'in-ride'
    booking.save(update_fields=['status', 'updated_at'])

    transaction.on_commit(partial(
        notify_user_event, rider_id, 'pickup_confirmed', ride.id, 'Pickup confirmed. Enjoy your ride!'
    ))
    return RideResult(ride=ride, booking=booking, message="Pickup confirmed")


@transaction.atomic
def complete_ride(ride_id, provider) -> RideResult:
    """
    Complete a ride.

    Riders on board are marked completed; bookings that were never picked
    up are canceled.
    """
    ride = _get_owned_ride(ride_id, provider)
    _transition(ride, 'completed', completed_at=timezone.now())

    completed = ride.bookings.filter(status='in-ride').update(status='completed', updated_at=timezone.now())
    no_shows = ride.bookings.filter(status__in=['pending', 'accepted']).update(
        status='canceled', updated_at=timezone.now()
    )

    transaction.on_commit(partial(
        notify_ride_event, ride, 'ride_completed', 'Your ride has been completed. Thank you for riding with us!'
    ))
    return RideResult(
        ride=ride,
        message="Ride completed successfully",
        extra={'completed_bookings': completed, 'canceled_bookings': no_shows},
    )


@transaction.atomic
def cancel_ride(ride_id, provider, reason: str = "Cancelled by provider") -> RideResult:
    ride = _get_owned_ride(ride_id, provider)
    _transition(ride, 'canceled', canceled_at=timezone.now(), cancellation_reason=reason)

    canceled = ride.bookings.filter(status__in=ACTIVE_BOOKING_STATUSES).update(
        status='canceled', updated_at=timezone.now()
    )

    transaction.on_commit(partial(notify_ride_event, ride, 'ride_cancelled', 'Provider cancelled the ride.'))
    return RideResult(ride=ride, message="Ride cancelled successfully", extra={'canceled_bookings': canceled})


@transaction.atomic
def update_live_location(ride_id, provider, latitude: float, longitude: float) -> RideResult:
    ride = _get_owned_ride(ride_id, provider)

    if ride.status != 'started':
        raise InvalidStateError("Live location can only be shared while the ride is in progress")

    ride.live_latitude = Decimal(str(round(latitude, 6)))
    ride.live_longitude = Decimal(str(round(longitude, 6)))
    ride.live_location_updated_at = timezone.now()
    ride.save(update_fields=['live_latitude', 'live_longitude', 'live_location_updated_at'])

    transaction.on_commit(partial(notify_ride_event, ride, 'ride_location', extra={'live_location': ride.live_location}))
    return RideResult(ride=ride, message="Location updated")


# ===================== Rider Operations =====================

def list_available_rides(now: Optional[datetime] = None):
    """Bookable rides that have not started yet."""
    now = now or timezone.now()
    return Ride.objects.filter(status='created', start_time__gt=now).select_related('provider')


def search_rides(start_point: str = "", destination: str = ""):
    """
    Case-insensitive substring search on start point and destination.

    Unlike list_available_rides this does not hide rides whose start time
    has passed.
    """
    return Ride.objects.filter(
        status='created',
        start_point__icontains=start_point or "",
        destination__icontains=destination or "",
    ).select_related('provider')


def book_ride(ride_id, rider) -> RideResult:
    """
    Book a seat for ``rider``.

    The booking is accepted immediately and carries a fresh OTP. The
    database allows one active booking per (ride, rider), so concurrent
    duplicate requests cannot both succeed.

    Raises:
        NotFoundError: no such ride
        AlreadyBookedError: the rider already holds an active booking
    """
    ride = _get_ride(ride_id)

    try:
        with transaction.atomic():
            booking = Booking.objects.create(
                ride=ride,
                rider=rider,
                otp=generate_otp(),
                status='accepted',
            )
    except IntegrityError as e:
        if not _is_duplicate_booking(e):
            raise
        logger.info("Rider %s already booked ride %s", rider.id, ride.id)
        raise AlreadyBookedError() from e

    logger.info("Rider %s booked ride %s (booking %s)", rider.id, ride.id, booking.id)
    transaction.on_commit(partial(
        notify_user_event, ride.provider_id, 'ride_booked', ride.id, 'A rider booked your ride.',
        extra={'booking_id': booking.id},
    ))

    return RideResult(ride=ride, booking=booking, message="Ride booked successfully")


@transaction.atomic
def cancel_booking(ride_id, rider) -> RideResult:
    ride = _get_ride(ride_id, for_update=True)

    booking = ride.bookings.filter(rider=rider, status__in=ACTIVE_BOOKING_STATUSES).first()
    if booking is None:
        raise NotFoundError("You have no active booking on this ride")

    if ride.status != 'created':
        raise InvalidStateError(f"Cannot cancel a booking once the ride is {ride.status}")

    booking.status = 'canceled'
    booking.save(update_fields=['status', 'updated_at'])

    transaction.on_commit(partial(
        notify_user_event, ride.provider_id, 'booking_cancelled', ride.id, 'A rider cancelled their booking.',
        extra={'booking_id': booking.id},
    ))
    return RideResult(ride=ride, booking=booking, message="Booking cancelled")


def list_rider_bookings(rider):
    return (
        Booking.objects.filter(rider=rider)
        .select_related('ride__provider')
        .order_by('-booked_at')
    )
