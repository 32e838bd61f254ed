"""Provider profile submission and lookup."""

import logging

from common.utils import validate_or_raise
from providers.models import ProviderProfile
from providers.serializers import ProviderDetailsInputSerializer
from services.exceptions import ForbiddenError
from services.profile_store import find_by_user, upsert_profile
from services.verification import verify_provider_documents

logger = logging.getLogger(__name__)


def save_provider_profile(user, data, extractor=None):
    """
    Validate, verify and upsert the provider's details.

    Verification runs before anything is written, so an OCR failure on the
    licence photo rejects the whole submission. Every submission overwrites
    the previous flags and OCR fields.

    Returns:
        (profile, created)
    """
    if user.role != "provider":
        raise ForbiddenError("Access denied. Only providers can add details.")

    fields = dict(validate_or_raise(ProviderDetailsInputSerializer(data=data)))

    outcome = verify_provider_documents(user, fields, extractor=extractor)
    fields.update(outcome.as_fields())

    profile, created = upsert_profile(
        ProviderProfile, user, fields, ProviderProfile.IDENTIFIER_FIELDS
    )

    logger.info(
        "Provider details %s for user %s (ocr_attempted=%s)",
        "created" if created else "updated", user.pk, outcome.ocr_attempted,
    )
    return profile, created


def get_provider_profile(user):
    return find_by_user(ProviderProfile, user, "Provider details not found.")
