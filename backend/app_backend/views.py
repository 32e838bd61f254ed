import redis
from django.conf import settings
from django.db import connection
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from channels.layers import get_channel_layer

from common.utils import error_response, validate_or_raise
from services.exceptions import MarketplaceError
from services.verification import check_document
from .serializers import DocumentCheckSerializer


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """Health check endpoint for monitoring system status"""

    health_status = {
        "status": "healthy",
        "timestamp": timezone.now().isoformat(),
        "services": {}
    }

    # Database check
    try:
        connection.ensure_connection()
        health_status["services"]["database"] = "healthy"
    except Exception as e:
        health_status["services"]["database"] = f"unhealthy: {e}"
        health_status["status"] = "unhealthy"

    # Channel layer check
    try:
        channel_layer = get_channel_layer()
        if channel_layer is not None:
            health_status["services"]["channels"] = "healthy"
        else:
            health_status["services"]["channels"] = "unhealthy: no channel layer"
            health_status["status"] = "unhealthy"
    except Exception as e:
        health_status["services"]["channels"] = f"unhealthy: {e}"
        health_status["status"] = "unhealthy"

    # Redis only backs the channel layer in production
    if "redis" in settings.CHANNEL_LAYERS["default"]["BACKEND"].lower():
        try:
            redis.Redis.from_url(settings.REDIS_URL, socket_timeout=3).ping()
            health_status["services"]["redis"] = "healthy"
        except Exception as e:
            health_status["services"]["redis"] = f"unhealthy: {e}"
            health_status["status"] = "unhealthy"

    health_status["services"]["ocr"] = settings.OCR_BACKEND or "disabled"

    status_code = (
        status.HTTP_200_OK
        if health_status["status"] == "healthy"
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )

    return Response(health_status, status=status_code)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def verification_check(request):
    """
    Compare a typed document number with the one read from its photo.

    Returns the match score and a hint for the user; nothing is saved.
    """
    try:
        data = validate_or_raise(DocumentCheckSerializer(data=request.data))
        result = check_document(data["document_class"], data["identifier"], data["photo"])
    except MarketplaceError as e:
        return error_response(e)

    return Response({
        "success": True,
        "document_class": result.document_class,
        "extracted_identifier": result.extracted_identifier,
        "match": result.result.as_dict(),
        "hint": result.hint,
    })
