from django.db import models
from django.db.models import Q
from django.conf import settings


class Ride(models.Model):
    """A scheduled ride offered by a provider"""

    STATUS_CHOICES = [
        ('created', 'Created'),
        ('started', 'Started'),
        ('completed', 'Completed'),
        ('canceled', 'Canceled'),
    ]

    CATEGORY_CHOICES = [
        ('Car', 'Car'),
        ('Bike', 'Bike'),
    ]

    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='offered_rides'
    )

    # Copied from the provider profile when the ride is created
    vehicle_category = models.CharField(max_length=10, choices=CATEGORY_CHOICES)

    # Route
    start_point = models.CharField(max_length=255)
    destination = models.CharField(max_length=255)
    break_locations = models.JSONField(default=list, blank=True)  # ordered stops

    # Schedule & price
    start_time = models.DateTimeField()
    end_time = models.DateTimeField(null=True, blank=True)
    ride_cost = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='created')
    women_only = models.BooleanField(default=False)

    # Live location while the ride is running
    live_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    live_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    live_location_updated_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    canceled_at = models.DateTimeField(null=True, blank=True)

    cancellation_reason = models.TextField(null=True, blank=True)

    class Meta:
        db_table = 'rides'
        ordering = ['start_time']

    def __str__(self):
        return f"Ride #{self.id} - {self.start_point} -> {self.destination} - {self.status}"

    @property
    def live_location(self):
        if self.live_latitude is None or self.live_longitude is None:
            return None
        return {
            'latitude': float(self.live_latitude),
            'longitude': float(self.live_longitude),
        }


class Booking(models.Model):
    """A rider's seat on a ride, with the pickup OTP"""

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
        ('in-ride', 'In Ride'),
        ('completed', 'Completed'),
        ('canceled', 'Canceled'),
    ]

    INACTIVE_STATUSES = ('rejected', 'canceled')

    ride = models.ForeignKey(
        Ride,
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    rider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='bookings'
    )

    otp = models.CharField(max_length=10)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')

    booked_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bookings'
        ordering = ['booked_at']
        constraints = [
            models.UniqueConstraint(
                fields=['ride', 'rider'],
                condition=~Q(status__in=['rejected', 'canceled']),
                name='unique_active_booking'
            )
        ]

    def __str__(self):
        return f"Booking #{self.id} - Ride {self.ride_id} -> Rider {self.rider_id} ({self.status})"

    @property
    def is_active(self):
        return self.status not in self.INACTIVE_STATUSES
