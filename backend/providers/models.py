from django.db import models
from django.conf import settings

User = settings.AUTH_USER_MODEL


class ProviderProfile(models.Model):
    """Vehicle and identity documents of a ride provider, with verification flags"""
    CATEGORY_CHOICES = [
        ('Car', 'Car'),
        ('Bike', 'Bike'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='provider_profile')

    # Vehicle details
    vehicle_category = models.CharField(max_length=10, choices=CATEGORY_CHOICES)
    vehicle_type = models.CharField(max_length=50, blank=True)  # only for cars
    is_previously_used_vehicle = models.BooleanField(default=False)

    # Document identifiers (each unique across all providers)
    vehicle_number = models.CharField(max_length=20, unique=True)
    rc_number = models.CharField(max_length=30, unique=True)
    insurance_number = models.CharField(max_length=30, unique=True)
    license_number = models.CharField(max_length=30, unique=True)
    aadhar_number = models.CharField(max_length=14, unique=True)

    # Document photos (opaque references: data URL, base64 or storage URL)
    vehicle_photo = models.TextField(blank=True)
    rc_photo = models.TextField(blank=True)
    insurance_photo = models.TextField(blank=True)
    license_photo = models.TextField(blank=True)
    aadhar_photo = models.TextField(blank=True)

    # Verification status
    rc_verified = models.BooleanField(default=False)
    insurance_verified = models.BooleanField(default=False)
    license_verified = models.BooleanField(default=False)
    aadhar_verified = models.BooleanField(default=False)

    # Read from the licence photo, kept for audit/display
    ocr_extracted_name = models.CharField(max_length=150, null=True, blank=True)
    ocr_extracted_license_number = models.CharField(max_length=50, null=True, blank=True)
    ocr_extracted_dob = models.CharField(max_length=30, null=True, blank=True)
    ocr_extracted_validity = models.CharField(max_length=30, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    IDENTIFIER_FIELDS = (
        'vehicle_number',
        'rc_number',
        'insurance_number',
        'license_number',
        'aadhar_number',
    )

    class Meta:
        db_table = 'provider_profiles'

    def __str__(self):
        return f"{self.user.username} - {self.vehicle_category} {self.vehicle_number}"

    @property
    def is_fully_verified(self):
        return all([self.rc_verified, self.insurance_verified, self.license_verified, self.aadhar_verified])
