from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from common.utils import error_response, validate_or_raise
from providers import services
from providers.permissions import IsProvider
from providers.serializers import ProviderProfileSerializer
from rides.serializers import (
    RideSerializer,
    RideCancelSerializer,
    LocationUpdateSerializer,
    PickupConfirmSerializer,
)
from services import ride_management
from services.exceptions import MarketplaceError


class ProviderDetailsView(APIView):
    """
    GET: the provider's saved details and verification flags
    POST: submit (or resubmit) vehicle and identity documents

    Every submission is verified from scratch; the response carries the
    resulting flags.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            profile = services.get_provider_profile(request.user)
        except MarketplaceError as e:
            return error_response(e)

        return Response({
            "success": True,
            "provider": ProviderProfileSerializer(profile).data,
        })

    def post(self, request):
        try:
            profile, created = services.save_provider_profile(request.user, request.data)
        except MarketplaceError as e:
            return error_response(e)

        return Response({
            "success": True,
            "message": "Provider details saved successfully" if created else "Provider details updated successfully",
            "provider": ProviderProfileSerializer(profile).data,
            "verification": {
                "rc_verified": profile.rc_verified,
                "insurance_verified": profile.insurance_verified,
                "license_verified": profile.license_verified,
                "aadhar_verified": profile.aadhar_verified,
            },
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class ProviderRidesView(APIView):
    """All rides offered by the current provider, with their bookings."""
    permission_classes = [IsAuthenticated, IsProvider]

    def get(self, request):
        rides = ride_management.list_provider_rides(request.user)
        data = RideSerializer(rides, many=True).data
        return Response({
            "success": True,
            "rides": data,
            "count": len(data),
        })


class ProviderRideDetailView(APIView):
    """DELETE a ride that has not started yet."""
    permission_classes = [IsAuthenticated, IsProvider]

    def delete(self, request, ride_id):
        try:
            result = ride_management.delete_ride(ride_id, request.user)
        except MarketplaceError as e:
            return error_response(e)

        return Response({
            "success": True,
            "message": result.message,
            "ride_id": result.extra["ride_id"],
        })


class ProviderRideActionView(APIView):
    """Base for POST actions on one of the provider's rides."""
    permission_classes = [IsAuthenticated, IsProvider]

    def perform(self, request, ride_id):
        raise NotImplementedError

    def post(self, request, ride_id):
        try:
            result = self.perform(request, ride_id)
        except MarketplaceError as e:
            return error_response(e)

        return Response({
            "success": True,
            "message": result.message,
            "ride": RideSerializer(result.ride).data,
            **result.extra,
        })


class StartRideView(ProviderRideActionView):
    def perform(self, request, ride_id):
        return ride_management.start_ride(ride_id, request.user)


class CompleteRideView(ProviderRideActionView):
    def perform(self, request, ride_id):
        return ride_management.complete_ride(ride_id, request.user)


class CancelRideView(ProviderRideActionView):
    def perform(self, request, ride_id):
        data = validate_or_raise(RideCancelSerializer(data=request.data))
        reason = data.get("reason") or "Cancelled by provider"
        return ride_management.cancel_ride(ride_id, request.user, reason=reason)


class RideLocationView(ProviderRideActionView):
    def perform(self, request, ride_id):
        data = validate_or_raise(LocationUpdateSerializer(data=request.data))
        return ride_management.update_live_location(
            ride_id, request.user, data["latitude"], data["longitude"]
        )


class ConfirmPickupView(ProviderRideActionView):
    def perform(self, request, ride_id):
        data = validate_or_raise(PickupConfirmSerializer(data=request.data))
        return ride_management.confirm_pickup(
            ride_id, request.user, data["rider_id"], data["otp"]
        )
