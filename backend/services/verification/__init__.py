"""
Document verification service.

This package handles:
    - Registry lookups against the simulated document authority
    - Fuzzy matching of typed vs OCR-read identifiers
    - OCR text extraction and document field patterns
    - Computing verified flags for provider and rider profiles
"""

from .engine import (
    DocumentCheck,
    VerificationOutcome,
    check_document,
    verify_provider_documents,
    verify_rider_documents,
)
from .extractor import (
    DisabledExtractor,
    OcrExtractionError,
    TesseractExtractor,
    TextExtractor,
    get_text_extractor,
)
from .matcher import MatchResult, match, match_aadhaar, match_license_number, match_rc_number
from .registry import AADHAR, DOCUMENT_CLASSES, INSURANCE, LICENSE, RC, RegistryRecord, lookup

__all__ = [
    # Engine
    "DocumentCheck",
    "VerificationOutcome",
    "check_document",
    "verify_provider_documents",
    "verify_rider_documents",
    # Extractor
    "DisabledExtractor",
    "OcrExtractionError",
    "TesseractExtractor",
    "TextExtractor",
    "get_text_extractor",
    # Matcher
    "MatchResult",
    "match",
    "match_aadhaar",
    "match_license_number",
    "match_rc_number",
    # Registry
    "AADHAR",
    "DOCUMENT_CLASSES",
    "INSURANCE",
    "LICENSE",
    "RC",
    "RegistryRecord",
    "lookup",
]
