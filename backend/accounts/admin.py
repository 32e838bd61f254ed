from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from accounts.models import User
from providers.models import ProviderProfile
from riders.models import RiderProfile


class ProviderProfileInline(admin.StackedInline):
    model = ProviderProfile
    can_delete = False
    extra = 0
    fields = [
        "vehicle_category",
        "vehicle_number",
        ("rc_number", "rc_verified"),
        ("insurance_number", "insurance_verified"),
        ("license_number", "license_verified"),
        ("aadhar_number", "aadhar_verified"),
    ]
    readonly_fields = ["rc_verified", "insurance_verified", "license_verified", "aadhar_verified"]


class RiderProfileInline(admin.StackedInline):
    model = RiderProfile
    can_delete = False
    extra = 0
    fields = ["aadhar_number", "mobile_number", "aadhar_verified"]
    readonly_fields = ["aadhar_verified"]


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Users with their marketplace role and whichever profile they submitted"""

    list_display = ["username", "name", "role", "gender", "mobile_number", "is_active"]
    list_filter = ["role", "gender", "is_active", "is_staff"]
    search_fields = ["username", "name", "email", "mobile_number"]
    ordering = ("username",)
    inlines = [ProviderProfileInline, RiderProfileInline]

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Marketplace", {"fields": ("role", "name", "gender", "age", "mobile_number")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Marketplace", {"fields": ("role", "name", "mobile_number")}),
    )
