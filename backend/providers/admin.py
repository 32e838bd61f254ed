from django.contrib import admin
from providers.models import ProviderProfile


@admin.register(ProviderProfile)
class ProviderProfileAdmin(admin.ModelAdmin):
    """Admin panel for provider documents and verification flags"""

    list_display = [
        "user",
        "vehicle_category",
        "vehicle_number",
        "rc_verified",
        "insurance_verified",
        "license_verified",
        "aadhar_verified",
        "updated_at",
    ]

    list_filter = [
        "vehicle_category",
        "rc_verified",
        "insurance_verified",
        "license_verified",
        "aadhar_verified",
    ]

    search_fields = [
        "user__username",
        "vehicle_number",
        "rc_number",
        "license_number",
    ]

    readonly_fields = [
        "ocr_extracted_name",
        "ocr_extracted_license_number",
        "ocr_extracted_dob",
        "ocr_extracted_validity",
        "created_at",
        "updated_at",
    ]

    ordering = ("user__username",)
