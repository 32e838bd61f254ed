"""
Services package - Business logic layer.

This package contains all business logic services that operate on Django models
but are decoupled from the HTTP/WebSocket layer.

Modules:
    - verification: Registry lookups, fuzzy matching, OCR and verified flags
    - profile_store: Profile upsert with identifier uniqueness
    - ride_management: Core ride lifecycle operations
    - exceptions: Error kinds shared by every service
"""

from .exceptions import (
    MarketplaceError,
    InvalidInputError,
    ForbiddenError,
    NotFoundError,
    DuplicateIdentifierError,
    ProfileIncompleteError,
    AlreadyBookedError,
    InvalidStateError,
    OcrUnavailableError,
    OcrProcessingFailedError,
)

__all__ = [
    "MarketplaceError",
    "InvalidInputError",
    "ForbiddenError",
    "NotFoundError",
    "DuplicateIdentifierError",
    "ProfileIncompleteError",
    "AlreadyBookedError",
    "InvalidStateError",
    "OcrUnavailableError",
    "OcrProcessingFailedError",
]
