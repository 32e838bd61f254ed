from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from common.utils import error_response
from riders import services
from riders.permissions import IsRider
from riders.serializers import RiderProfileSerializer
from rides.serializers import RiderBookingSerializer
from services import ride_management
from services.exceptions import MarketplaceError


class RiderDetailsView(APIView):
    """
    GET  -> the rider's saved details
    POST -> submit (or resubmit) Aadhaar details; verified on every submission
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            profile = services.get_rider_profile(request.user)
        except MarketplaceError as e:
            return error_response(e)

        return Response({
            "success": True,
            "rider": RiderProfileSerializer(profile).data,
        })

    def post(self, request):
        try:
            profile, created = services.save_rider_profile(request.user, request.data)
        except MarketplaceError as e:
            return error_response(e)

        return Response({
            "success": True,
            "message": "Rider details saved successfully" if created else "Rider details updated successfully",
            "rider": RiderProfileSerializer(profile).data,
            "verification": {"aadhar_verified": profile.aadhar_verified},
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class RiderBookingsView(APIView):
    """
    GET: the rider's bookings, newest first, with OTPs
    """
    permission_classes = [IsAuthenticated, IsRider]

    def get(self, request):
        bookings = ride_management.list_rider_bookings(request.user)
        data = RiderBookingSerializer(bookings, many=True).data
        return Response({"success": True, "count": len(data), "bookings": data})
