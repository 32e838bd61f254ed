from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from .views import health_check, verification_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check),  # Health check endpoint

    # Authentication endpoints (at /api/auth/)
    path('api/auth/', include('accounts.urls')),  # register, login, refresh, me, role

    # Provider APIs (documents, own rides and ride actions)
    path('api/provider/', include('providers.urls')),

    # Rider APIs (documents, bookings)
    path('api/rider/', include('riders.urls')),

    # Ride browsing, creation and booking (at /api/rides/)
    path('api/rides/', include('rides.urls')),

    # Document number hint before submitting details
    path('api/verification/check/', verification_check, name='verification-check'),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
