"""Tells what to show in the Django admin interface for rides app"""

from django.contrib import admin
from .models import Ride, Booking


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ("rider", "status", "otp", "booked_at")
    readonly_fields = ("booked_at",)


@admin.register(Ride)
class RideAdmin(admin.ModelAdmin):
    """Ride admin"""
    list_display = ['id', 'provider', 'start_point', 'destination', 'start_time', 'ride_cost', 'status', 'women_only']
    list_filter = ['status', 'vehicle_category', 'women_only', 'start_time']
    search_fields = ['provider__username', 'start_point', 'destination']
    readonly_fields = ['created_at', 'started_at', 'completed_at', 'canceled_at', 'live_location_updated_at']
    date_hierarchy = 'start_time'
    inlines = [BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "ride", "rider", "status", "booked_at")
    list_filter = ("status",)
    search_fields = ("ride__id", "rider__username")
