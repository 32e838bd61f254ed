from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from common.utils import error_response, validate_or_raise
from riders.permissions import IsRider
from services import ride_management
from services.exceptions import MarketplaceError
from .serializers import (
    BookedRideSerializer,
    RideSerializer,
    RideListSerializer,
    RiderBookingSerializer,
    RideSearchSerializer,
)


# ==================== Ride Listing & Creation ====================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def rides(request):
    """
    GET: rides open for booking that start in the future
    POST: create a ride (providers with saved details only)
    """
    if request.method == 'GET':
        available = ride_management.list_available_rides()
        data = RideListSerializer(available, many=True).data
        return Response({'success': True, 'count': len(data), 'rides': data})

    try:
        result = ride_management.create_ride(request.user, request.data)
    except MarketplaceError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': result.message,
        'ride': RideSerializer(result.ride).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def search_rides(request):
    """Search open rides by start point and/or destination (case-insensitive)"""
    try:
        params = validate_or_raise(RideSearchSerializer(data=request.query_params))
    except MarketplaceError as e:
        return error_response(e)

    matches = ride_management.search_rides(params['start_point'], params['destination'])
    data = RideListSerializer(matches, many=True).data
    return Response({'success': True, 'count': len(data), 'rides': data})


# ==================== Rider Booking APIs ====================

@api_view(['POST'])
@permission_classes([IsAuthenticated, IsRider])
def book_ride(request, ride_id):
    """Book a seat; the response carries the pickup OTP"""
    try:
        result = ride_management.book_ride(ride_id, request.user)
    except MarketplaceError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': result.message,
        'ride': BookedRideSerializer(result.ride, context={'booking': result.booking}).data,
        'booking': RiderBookingSerializer(result.booking).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsRider])
def cancel_booking(request, ride_id):
    """Cancel the rider's booking while the ride has not started"""
    try:
        result = ride_management.cancel_booking(ride_id, request.user)
    except MarketplaceError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': result.message,
        'booking': RiderBookingSerializer(result.booking).data,
    })
