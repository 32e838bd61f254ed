from django.urls import path
from .views import (
    ProviderDetailsView,
    ProviderRidesView,
    ProviderRideDetailView,
    StartRideView,
    CompleteRideView,
    CancelRideView,
    RideLocationView,
    ConfirmPickupView,
)

urlpatterns = [
    path("details/", ProviderDetailsView.as_view(), name="provider-details"),
    path("rides/", ProviderRidesView.as_view(), name="provider-rides"),
    path("rides/<int:ride_id>/", ProviderRideDetailView.as_view(), name="provider-ride-detail"),
    path("rides/<int:ride_id>/start/", StartRideView.as_view(), name="provider-ride-start"),
    path("rides/<int:ride_id>/complete/", CompleteRideView.as_view(), name="provider-ride-complete"),
    path("rides/<int:ride_id>/cancel/", CancelRideView.as_view(), name="provider-ride-cancel"),
    path("rides/<int:ride_id>/location/", RideLocationView.as_view(), name="provider-ride-location"),
    path("rides/<int:ride_id>/confirm-pickup/", ConfirmPickupView.as_view(), name="provider-ride-confirm-pickup"),
]
