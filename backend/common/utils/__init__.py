"""Common utility functions."""

from .responses import STATUS_BY_KIND, error_response
from .validation import first_error_message, validate_or_raise

__all__ = [
    "STATUS_BY_KIND",
    "error_response",
    "first_error_message",
    "validate_or_raise",
]
