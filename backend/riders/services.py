"""Rider profile submission and lookup."""

import logging

from common.utils import validate_or_raise
from riders.models import RiderProfile
from riders.serializers import RiderDetailsInputSerializer
from services.exceptions import ForbiddenError
from services.profile_store import find_by_user, upsert_profile
from services.verification import verify_rider_documents

logger = logging.getLogger(__name__)


def save_rider_profile(user, data):
    """
    Validate, verify and upsert the rider's details.

    The mobile number falls back to the one given at registration.

    Returns:
        (profile, created)
    """
    if user.role != "rider":
        raise ForbiddenError("Access denied. Only riders can add details.")

    fields = dict(validate_or_raise(RiderDetailsInputSerializer(data=data)))
    fields["mobile_number"] = fields.get("mobile_number") or user.mobile_number

    outcome = verify_rider_documents(user, fields)
    fields.update(outcome.as_fields())

    profile, created = upsert_profile(RiderProfile, user, fields, RiderProfile.IDENTIFIER_FIELDS)

    logger.info("Rider details %s for user %s", "created" if created else "updated", user.pk)
    return profile, created


def get_rider_profile(user):
    return find_by_user(RiderProfile, user, "Rider details not found.")
