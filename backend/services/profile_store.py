"""
Upsert-with-uniqueness for profile models.

One profile per user; identifier columns carry unique indexes. The database
enforces uniqueness, this module only translates a violation into
DuplicateIdentifierError. There is no read-then-write uniqueness check.
"""

import logging
from typing import Iterable, Optional, Tuple

from django.db import IntegrityError, transaction

from services.exceptions import DuplicateIdentifierError, NotFoundError

logger = logging.getLogger(__name__)


def violated_field(error: IntegrityError, identifier_fields: Iterable[str]) -> Optional[str]:
    """
    Work out which identifier column a unique violation was raised for.

    SQLite reports ``UNIQUE constraint failed: table.column`` and PostgreSQL
    names the column in the constraint name and in ``Key (column)=``, so
    the column name appears in the message on both.
    """
    message = str(error).lower()
    for field_name in identifier_fields:
        if field_name.lower() in message:
            return field_name
    return None


def upsert_profile(model, user, fields: dict, identifier_fields: Iterable[str]) -> Tuple[object, bool]:
    """
    Insert or fully overwrite the profile owned by ``user``.

    Returns:
        (profile, created)

    Raises:
        DuplicateIdentifierError: an identifier belongs to another profile
    """
    identifier_fields = tuple(identifier_fields)
    for attempt in (1, 2):
        try:
            with transaction.atomic():
                return model.objects.update_or_create(user=user, defaults=fields)
        except IntegrityError as e:
            field_name = violated_field(e, identifier_fields)
            if field_name is not None:
                logger.info(
                    "Duplicate %s rejected for user %s on %s",
                    field_name, user.pk, model._meta.model_name,
                )
                raise DuplicateIdentifierError(field_name) from e
            if attempt == 2:
                raise
            # A concurrent first save for this user won the insert; the
            # second pass finds that row and updates it.
            logger.info("Retrying %s save for user %s", model._meta.model_name, user.pk)


def find_by_user(model, user, message: str = "Profile not found"):
    try:
        return model.objects.get(user=user)
    except model.DoesNotExist:
        raise NotFoundError(message)
