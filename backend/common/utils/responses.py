"""Turn service-layer errors into API responses."""

from rest_framework import status
from rest_framework.response import Response

from services.exceptions import MarketplaceError

STATUS_BY_KIND = {
    "invalid_input": status.HTTP_400_BAD_REQUEST,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "duplicate_identifier": status.HTTP_400_BAD_REQUEST,
    "profile_incomplete": status.HTTP_400_BAD_REQUEST,
    "already_booked": status.HTTP_400_BAD_REQUEST,
    "invalid_state": status.HTTP_400_BAD_REQUEST,
    "ocr_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "ocr_processing_failed": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_response(exc: MarketplaceError) -> Response:
    """
    Build the standard error body:

        {"success": false, "error": <kind>, "message": <text>}

    Duplicate identifiers add ``field`` and invalid input adds ``errors``.
    """
    body = {
        "success": False,
        "error": exc.kind,
        "message": exc.message,
    }
    for key, value in exc.extra.items():
        if value is not None:
            body[key] = value

    return Response(body, status=STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST))
