from django.db import models
from django.conf import settings

User = settings.AUTH_USER_MODEL


class RiderProfile(models.Model):
    """Identity details of a rider, with the Aadhaar verification flag"""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='rider_profile')

    aadhar_number = models.CharField(max_length=14, unique=True)
    mobile_number = models.CharField(max_length=15, blank=True)

    # Opaque photo references (data URL, base64 or storage URL)
    aadhar_photo = models.TextField(blank=True)
    live_photo = models.TextField(blank=True)  # selfie

    aadhar_verified = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    IDENTIFIER_FIELDS = ('aadhar_number',)

    class Meta:
        db_table = 'rider_profiles'

    def __str__(self):
        return f"{self.user.username} - rider"
