from django.contrib import admin
from riders.models import RiderProfile


@admin.register(RiderProfile)
class RiderProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "aadhar_number", "mobile_number", "aadhar_verified", "updated_at"]
    list_filter = ["aadhar_verified"]
    search_fields = ["user__username", "aadhar_number", "mobile_number"]
    readonly_fields = ["created_at", "updated_at"]
