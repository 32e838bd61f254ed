"""
OCR text extraction.

The engine only needs ``extract_text(payload) -> str``. Which backend runs
is decided by the ``OCR_BACKEND`` setting:

    ""           -> DisabledExtractor, every call reports "unavailable"
    "tesseract"  -> TesseractExtractor (Pillow + pytesseract)

Document specific fields are pulled out of the raw text with the
``parse_*`` / ``extract_*`` helpers at the bottom of this module.
"""

import base64
import binascii
import io
import logging
import re
from typing import Dict, Optional

import pytesseract
from django.conf import settings
from PIL import Image, UnidentifiedImageError

from services.exceptions import OcrUnavailableError
from .registry import AADHAR, LICENSE, RC

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/[a-zA-Z0-9.+-]+;base64,")


class OcrExtractionError(Exception):
    """The OCR backend ran but could not produce text for this payload."""
    pass


class TextExtractor:
    """Interface for OCR backends."""

    def extract_text(self, payload) -> str:
        raise NotImplementedError


class DisabledExtractor(TextExtractor):
    """Used when no OCR backend is configured."""

    def extract_text(self, payload) -> str:
        raise OcrUnavailableError("OCR is not configured on this server")


class TesseractExtractor(TextExtractor):
    """Runs a single Tesseract pass over a base64 / data URL image payload."""

    def __init__(self, timeout=None, languages=None, tesseract_cmd=None):
        self.timeout = timeout if timeout is not None else settings.OCR_TIMEOUT_SECONDS
        self.languages = languages or settings.OCR_LANGUAGES
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def extract_text(self, payload) -> str:
        image = decode_image_payload(payload)
        try:
            text = pytesseract.image_to_string(image, lang=self.languages, timeout=self.timeout)
        except pytesseract.TesseractNotFoundError as e:
            raise OcrUnavailableError("Tesseract binary is not installed") from e
        except pytesseract.TesseractError as e:
            raise OcrExtractionError(f"Tesseract failed: {e}") from e
        except RuntimeError as e:
            # pytesseract signals its own timeout with a bare RuntimeError
            if "timeout" in str(e).lower():
                raise OcrUnavailableError("OCR timed out") from e
            raise OcrExtractionError(str(e)) from e

        logger.debug("OCR extracted %d characters", len(text or ""))
        return text or ""


def decode_image_payload(payload) -> Image.Image:
    """Turn a data URL, a base64 string or raw bytes into a PIL image."""
    if not payload:
        raise OcrExtractionError("Empty image payload")

    if isinstance(payload, str):
        data = _DATA_URL_PREFIX.sub("", payload.strip())
        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise OcrExtractionError("Image payload is not valid base64") from e
    else:
        raw = bytes(payload)

    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise OcrExtractionError("Payload is not a readable image") from e
    return image


def get_text_extractor() -> TextExtractor:
    """Build the extractor selected by settings."""
    backend = (getattr(settings, "OCR_BACKEND", "") or "").strip().lower()
    if backend == "tesseract":
        return TesseractExtractor(tesseract_cmd=getattr(settings, "TESSERACT_CMD", None))
    if backend:
        logger.warning("Unknown OCR_BACKEND %r, OCR disabled", backend)
    return DisabledExtractor()


# ---------------------- Document field patterns ----------------------

_DATE = re.compile(r"(\d{4}-\d{2}-\d{2}|\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4})")

_LICENSE_LABELS = {
    "name": re.compile(r"^\s*name\s*[:\-]?\s*(.+?)\s*$", re.IGNORECASE),
    "license_number": re.compile(
        r"^\s*(?:dl\s*(?:no|number)|licen[cs]e\s*(?:no|number)?)\.?\s*[:\-]?\s*(.+?)\s*$",
        re.IGNORECASE,
    ),
    "dob": re.compile(r"^\s*(?:dob|d\.o\.b|date\s+of\s+birth)\.?\s*[:\-]?\s*(.+?)\s*$", re.IGNORECASE),
    "validity": re.compile(
        r"^\s*(?:valid\s*(?:till|upto|up\s+to)|validity|expiry(?:\s+date)?)\s*[:\-]?\s*(.+?)\s*$",
        re.IGNORECASE,
    ),
}

_DATE_HINTS = {
    "dob": ("birth", "dob"),
    "validity": ("valid", "expir", "exp"),
}

_AADHAAR_NUMBER = re.compile(r"\b\d{4}\s?\d{4}\s?\d{4}\b")
_RC_NUMBER = re.compile(r"\b[A-Z]{2}\d{2}[A-Z]{2}\d{4}\b", re.IGNORECASE)


def parse_license_fields(text: Optional[str]) -> Dict[str, Optional[str]]:
    """
    Pull name, licence number, date of birth and validity from licence text.

    Labelled lines ("Name: ...", "DL Number: ...", "DOB: ...",
    "Valid Till: ...") win; dates on lines mentioning birth/expiry are
    used as a fallback. Fields that cannot be found are None.
    """
    fields = {key: None for key in _LICENSE_LABELS}
    lines = (text or "").splitlines()

    for line in lines:
        for key, pattern in _LICENSE_LABELS.items():
            if fields[key]:
                continue
            found = pattern.match(line)
            if found and found.group(1):
                fields[key] = found.group(1)

    for key, hints in _DATE_HINTS.items():
        if fields[key]:
            continue
        for line in lines:
            if any(hint in line.lower() for hint in hints):
                date = _DATE.search(line)
                if date:
                    fields[key] = date.group(1)
                    break

    return fields


def extract_aadhaar_number(text: Optional[str]) -> Optional[str]:
    found = _AADHAAR_NUMBER.search(text or "")
    return re.sub(r"\s", "", found.group(0)) if found else None


def extract_rc_number(text: Optional[str]) -> Optional[str]:
    found = _RC_NUMBER.search(text or "")
    return found.group(0).upper() if found else None


def extract_license_number(text: Optional[str]) -> Optional[str]:
    return parse_license_fields(text)["license_number"]


IDENTIFIER_EXTRACTORS = {
    AADHAR: extract_aadhaar_number,
    RC: extract_rc_number,
    LICENSE: extract_license_number,
}
