from rest_framework import serializers

from riders.models import RiderProfile
from accounts.serializers import UserSerializer


class RiderDetailsInputSerializer(serializers.Serializer):
    """Validates a rider details submission; uniqueness is left to the database."""
    aadhar_number = serializers.CharField(
        max_length=14,
        error_messages={"required": "Aadhaar number is required."},
    )
    mobile_number = serializers.CharField(max_length=15, required=False, allow_blank=True)
    aadhar_photo = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    live_photo = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)


class RiderProfileSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)

    class Meta:
        model = RiderProfile
        fields = [
            "id",
            "user",
            "aadhar_number",
            "mobile_number",
            "aadhar_photo",
            "live_photo",
            "aadhar_verified",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
