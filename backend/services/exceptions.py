"""Error taxonomy shared by the verification pipeline and the ride engine.

Every error carries a machine-readable ``kind`` and a human message. Views
turn them into responses with ``common.utils.responses.error_response``.
"""


class MarketplaceError(Exception):
    """Base class for all expected, user-facing failures."""
    kind = "error"
    default_message = "Request could not be processed"

    def __init__(self, message: str = "", **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class InvalidInputError(MarketplaceError):
    """Raised when a required field is missing or malformed."""
    kind = "invalid_input"
    default_message = "Invalid input"

    def __init__(self, message: str = "", errors=None):
        super().__init__(message, errors=errors)
        self.errors = errors


class ForbiddenError(MarketplaceError):
    """Raised on a role or ownership mismatch."""
    kind = "forbidden"
    default_message = "You are not allowed to perform this action"


class NotFoundError(MarketplaceError):
    """Raised when the requested entity does not exist."""
    kind = "not_found"
    default_message = "Not found"


class DuplicateIdentifierError(MarketplaceError):
    """Raised when a unique document identifier is already registered."""
    kind = "duplicate_identifier"

    def __init__(self, field: str, message: str = ""):
        self.field = field
        label = field.replace("_", " ")
        super().__init__(
            message or f"This {label} is already registered to another account",
            field=field,
        )


class ProfileIncompleteError(MarketplaceError):
    """Raised when a provider tries to offer rides without a profile."""
    kind = "profile_incomplete"
    default_message = "Please complete your provider details before creating rides"


class AlreadyBookedError(MarketplaceError):
    """Raised when a rider already holds an active booking on a ride."""
    kind = "already_booked"
    default_message = "You have already booked this ride"


class InvalidStateError(MarketplaceError):
    """Raised on an illegal lifecycle transition."""
    kind = "invalid_state"
    default_message = "This action is not allowed in the current state"


class OcrUnavailableError(MarketplaceError):
    """Raised when the OCR collaborator is not configured or did not answer."""
    kind = "ocr_unavailable"
    default_message = "Document text extraction is currently unavailable"


class OcrProcessingFailedError(MarketplaceError):
    """Raised when OCR ran but returned nothing usable."""
    kind = "ocr_processing_failed"
    default_message = "OCR verification failed. Please try again with a clearer image."
