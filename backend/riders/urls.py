from django.urls import path

from .views import RiderDetailsView, RiderBookingsView

urlpatterns = [
    path("details/", RiderDetailsView.as_view(), name="rider-details"),
    path("bookings/", RiderBookingsView.as_view(), name="rider-bookings"),
]
