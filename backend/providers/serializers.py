from rest_framework import serializers

from providers.models import ProviderProfile
from accounts.serializers import UserSerializer


class ProviderDetailsInputSerializer(serializers.Serializer):
    """
    Validates a provider details submission.

    Deliberately not a ModelSerializer: identifier uniqueness is enforced
    by the database on save, not by pre-checking here.
    """
    vehicle_category = serializers.ChoiceField(
        choices=ProviderProfile.CATEGORY_CHOICES,
        error_messages={
            "invalid_choice": 'Vehicle category must be "Car" or "Bike".',
            "required": "Vehicle category is required.",
        },
    )
    vehicle_type = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    vehicle_number = serializers.CharField(max_length=20)
    rc_number = serializers.CharField(max_length=30)
    insurance_number = serializers.CharField(max_length=30)
    license_number = serializers.CharField(max_length=30)
    aadhar_number = serializers.CharField(max_length=14)

    vehicle_photo = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    rc_photo = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    insurance_photo = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    license_photo = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    aadhar_photo = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)

    is_previously_used_vehicle = serializers.BooleanField(required=False, default=False)

    def validate(self, data):
        if data["vehicle_category"] == "Car" and not data.get("vehicle_type"):
            raise serializers.ValidationError({"vehicle_type": "Vehicle type is required for cars."})
        if data["vehicle_category"] != "Car":
            data["vehicle_type"] = ""
        return data


class ProviderProfileSerializer(serializers.ModelSerializer):
    """
    Full provider profile serializer
    """
    user = UserSerializer(read_only=True)
    is_fully_verified = serializers.BooleanField(read_only=True)

    class Meta:
        model = ProviderProfile
        fields = [
            "id",
            "user",
            "vehicle_category",
            "vehicle_type",
            "vehicle_number",
            "rc_number",
            "insurance_number",
            "license_number",
            "aadhar_number",
            "vehicle_photo",
            "rc_photo",
            "insurance_photo",
            "license_photo",
            "aadhar_photo",
            "is_previously_used_vehicle",
            "rc_verified",
            "insurance_verified",
            "license_verified",
            "aadhar_verified",
            "is_fully_verified",
            "ocr_extracted_name",
            "ocr_extracted_license_number",
            "ocr_extracted_dob",
            "ocr_extracted_validity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

