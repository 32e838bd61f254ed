import decimal

from rest_framework import serializers

from accounts.serializers import UserContactSerializer
from .models import Ride, Booking


class RoundedDecimalField(serializers.DecimalField):
    """DecimalField that rounds extra decimal places instead of rejecting them"""

    def validate_precision(self, value):
        exponent = decimal.Decimal(1).scaleb(-self.decimal_places)
        try:
            value = value.quantize(exponent, rounding=self.rounding)
        except decimal.InvalidOperation:
            self.fail('max_digits', max_digits=self.max_digits)
        return super().validate_precision(value)


class BookingSerializer(serializers.ModelSerializer):
    """Booking as the provider sees it: rider identity, no OTP"""
    rider = UserContactSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = ['id', 'rider', 'status', 'booked_at', 'updated_at']
        read_only_fields = fields


class RideSerializer(serializers.ModelSerializer):
    """Full ride, for the owning provider"""
    provider = UserContactSerializer(read_only=True)
    bookings = BookingSerializer(many=True, read_only=True)
    live_location = serializers.SerializerMethodField()

    class Meta:
        model = Ride
        fields = ['id', 'provider', 'vehicle_category', 'start_point', 'destination',
                  'break_locations', 'start_time', 'end_time', 'ride_cost', 'status',
                  'women_only', 'live_location', 'live_location_updated_at', 'bookings',
                  'created_at', 'started_at', 'completed_at', 'canceled_at',
                  'cancellation_reason']
        read_only_fields = fields

    def get_live_location(self, obj):
        return obj.live_location


class RideListSerializer(serializers.ModelSerializer):
    """Public listing; other riders' bookings and live location are left out"""
    provider = UserContactSerializer(read_only=True)

    class Meta:
        model = Ride
        fields = ['id', 'provider', 'vehicle_category', 'start_point', 'destination',
                  'break_locations', 'start_time', 'end_time', 'ride_cost', 'status',
                  'women_only', 'created_at']
        read_only_fields = fields


class BookedRideSerializer(RideListSerializer):
    """Ride returned to the rider who just booked it, with only their own booking"""
    bookings = serializers.SerializerMethodField()

    class Meta(RideListSerializer.Meta):
        fields = RideListSerializer.Meta.fields + ['bookings']
        read_only_fields = fields

    def get_bookings(self, obj):
        booking = self.context.get('booking')
        return [BookingSerializer(booking).data] if booking is not None else []


class RiderBookingSerializer(serializers.ModelSerializer):
    """A rider's own booking, including the pickup OTP"""
    ride = RideListSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = ['id', 'ride', 'otp', 'status', 'booked_at', 'updated_at']
        read_only_fields = fields


class RideCreateSerializer(serializers.Serializer):
    """Serializer for creating rides"""
    start_point = serializers.CharField(max_length=255)
    destination = serializers.CharField(max_length=255)
    break_locations = serializers.ListField(
        child=serializers.CharField(max_length=255),
        required=False,
        default=list,
    )
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField(required=False, allow_null=True)
    ride_cost = RoundedDecimalField(max_digits=10, decimal_places=2, rounding=decimal.ROUND_HALF_UP)
    women_only = serializers.BooleanField(required=False, default=False)
    # Optional override; normally copied from the provider profile
    vehicle_category = serializers.ChoiceField(choices=Ride.CATEGORY_CHOICES, required=False)

    def validate_ride_cost(self, value):
        if value <= 0:
            raise serializers.ValidationError("Ride cost must be greater than zero.")
        return value

    def validate(self, data):
        end_time = data.get('end_time')
        if end_time is not None and end_time <= data['start_time']:
            raise serializers.ValidationError({'end_time': 'End time must be after start time.'})
        return data


class RideSearchSerializer(serializers.Serializer):
    start_point = serializers.CharField(required=False, allow_blank=True, default='')
    destination = serializers.CharField(required=False, allow_blank=True, default='')


class RideCancelSerializer(serializers.Serializer):
    """Serializer for ride cancellation"""
    reason = serializers.CharField(required=False, allow_blank=True)


class LocationUpdateSerializer(serializers.Serializer):
    """
    Serializer for the provider's live GPS location.
    """
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)


class PickupConfirmSerializer(serializers.Serializer):
    rider_id = serializers.IntegerField()
    otp = serializers.CharField(max_length=10)
