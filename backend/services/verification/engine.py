"""
Document verification for provider and rider profiles.

Each submission is verified from scratch. RC, insurance and Aadhaar flags
come straight from the registry. The licence flag additionally needs an OCR
read of the licence photo that agrees with both the user and the registry.

OCR failure policy:
    - extractor unavailable / timed out -> licence left unverified, save goes on
    - extractor failed or returned no text -> OcrProcessingFailedError, nothing saved
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from services.exceptions import (
    InvalidInputError,
    OcrProcessingFailedError,
    OcrUnavailableError,
)
from . import matcher, registry
from .extractor import (
    IDENTIFIER_EXTRACTORS,
    OcrExtractionError,
    TextExtractor,
    get_text_extractor,
    parse_license_fields,
)
from .registry import AADHAR, INSURANCE, LICENSE, RC

logger = logging.getLogger(__name__)

OCR_SHADOW_FIELDS = {
    "name": "ocr_extracted_name",
    "license_number": "ocr_extracted_license_number",
    "dob": "ocr_extracted_dob",
    "validity": "ocr_extracted_validity",
}

DOCUMENT_LABELS = {
    AADHAR: "Aadhaar number",
    RC: "RC number",
    LICENSE: "License number",
}


@dataclass
class VerificationOutcome:
    """Flags and OCR shadow fields to persist on a profile."""
    flags: Dict[str, bool]
    extracted: Dict[str, Optional[str]] = field(default_factory=dict)
    ocr_attempted: bool = False

    def as_fields(self) -> Dict[str, object]:
        return {**self.flags, **self.extracted}


@dataclass
class DocumentCheck:
    document_class: str
    extracted_identifier: Optional[str]
    result: matcher.MatchResult
    hint: str = ""


def _empty_shadow_fields():
    return {column: None for column in OCR_SHADOW_FIELDS.values()}


def _read_text(extractor: TextExtractor, payload) -> str:
    """Single OCR attempt. Unavailable propagates, failures become OcrProcessingFailedError."""
    try:
        text = extractor.extract_text(payload)
    except OcrExtractionError as e:
        logger.exception("OCR extraction failed: %s", e)
        raise OcrProcessingFailedError() from e

    if not text or not text.strip():
        logger.warning("OCR returned no text")
        raise OcrProcessingFailedError()
    return text


def license_checks_pass(registered_name: str, submitted_number: str, ocr_fields: Dict) -> bool:
    """
    All four licence conditions.

    The name comparisons are exact and case-sensitive.
    """
    extracted_number = ocr_fields.get("license_number")
    extracted_name = ocr_fields.get("name")

    if not extracted_number:
        logger.info("Licence number not found in OCR text")
        return False

    if extracted_name != registered_name:
        logger.info("Licence name on document does not match registered name")
        return False

    numbers_agree = (
        extracted_number == submitted_number
        or matcher.match_license_number(submitted_number, extracted_number).is_match
    )
    if not numbers_agree:
        logger.info("Licence number on document does not match submitted number")
        return False

    record = registry.lookup(LICENSE, submitted_number)
    if not record.is_valid or record.claimed_owner_name != registered_name:
        logger.info("Licence %s rejected by registry", submitted_number)
        return False

    return True


def verify_provider_documents(user, submission: Dict, extractor: Optional[TextExtractor] = None) -> VerificationOutcome:
    """
    Compute provider verification flags for one submission.

    Args:
        user: the submitting User (its ``name`` is the registered name)
        submission: validated provider fields (identifiers and photo references)
        extractor: OCR backend, defaults to the configured one

    Raises:
        OcrProcessingFailedError: the licence photo could not be read
    """
    flags = {
        "rc_verified": registry.is_valid(RC, submission.get("rc_number")),
        "insurance_verified": registry.is_valid(INSURANCE, submission.get("insurance_number")),
        "aadhar_verified": registry.is_valid(AADHAR, submission.get("aadhar_number")),
        "license_verified": False,
    }
    outcome = VerificationOutcome(flags=flags, extracted=_empty_shadow_fields())

    license_photo = submission.get("license_photo")
    if not license_photo:
        return outcome

    extractor = extractor or get_text_extractor()
    try:
        text = _read_text(extractor, license_photo)
    except OcrUnavailableError as e:
        logger.warning("OCR unavailable for user %s, licence left unverified: %s", user.pk, e.message)
        return outcome

    ocr_fields = parse_license_fields(text)
    outcome.ocr_attempted = True
    outcome.extracted = {
        column: ocr_fields.get(key) for key, column in OCR_SHADOW_FIELDS.items()
    }
    flags["license_verified"] = license_checks_pass(
        getattr(user, "name", ""),
        submission.get("license_number") or "",
        ocr_fields,
    )

    logger.info("Provider verification for user %s: %s", user.pk, flags)
    return outcome


def verify_rider_documents(user, submission: Dict) -> VerificationOutcome:
    flags = {"aadhar_verified": registry.is_valid(AADHAR, submission.get("aadhar_number"))}
    logger.info("Rider verification for user %s: %s", user.pk, flags)
    return VerificationOutcome(flags=flags)


def check_document(document_class: str, identifier: str, photo, extractor: Optional[TextExtractor] = None) -> DocumentCheck:
    """
    Compare a typed identifier with the one printed on its photo.

    Used for hinting before a profile is submitted. Unlike profile saves,
    an unavailable extractor is reported to the caller.
    """
    if document_class not in IDENTIFIER_EXTRACTORS:
        raise InvalidInputError(f"Unsupported document class: {document_class}")
    if not photo:
        raise InvalidInputError("A document photo is required")

    extractor = extractor or get_text_extractor()
    text = _read_text(extractor, photo)
    extracted = IDENTIFIER_EXTRACTORS[document_class](text)

    result = matcher.match(document_class, identifier, extracted)
    hint = matcher.mismatch_summary(DOCUMENT_LABELS[document_class], identifier, extracted, result)
    return DocumentCheck(
        document_class=document_class,
        extracted_identifier=extracted,
        result=result,
        hint=hint,
    )
