"""
Fuzzy comparison of user-typed identifiers against OCR output.

OCR misreads characters and mangles spacing, so identifiers are normalised
per document class and compared by Levenshtein similarity. Everything here
is a pure function of its inputs.
"""

import re
from dataclasses import dataclass

from .registry import AADHAR, LICENSE, RC

THRESHOLDS = {
    AADHAR: 0.92,
    RC: 0.90,
    LICENSE: 0.90,
}

# Scores are reported (and compared) with this many decimals.
SCORE_PRECISION = 2

_NON_DIGITS = re.compile(r"\D+")
_NON_ALNUM = re.compile(r"[^A-Z0-9]+")


@dataclass(frozen=True)
class MatchResult:
    is_match: bool
    score: float
    normalized_input: str
    normalized_extracted: str

    def as_dict(self):
        return {
            "is_match": self.is_match,
            "score": self.score,
            "normalized_input": self.normalized_input,
            "normalized_extracted": self.normalized_extracted,
        }


def only_digits(value) -> str:
    return _NON_DIGITS.sub("", value or "")


def only_alphanumeric_upper(value) -> str:
    return _NON_ALNUM.sub("", (value or "").upper())


NORMALIZERS = {
    AADHAR: only_digits,
    RC: only_alphanumeric_upper,
    LICENSE: only_alphanumeric_upper,
}


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit cost insertions, deletions and substitutions."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / longest length. Two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest


def _match(normalize, input_value, extracted_value, min_score) -> MatchResult:
    ni = normalize(input_value)
    ne = normalize(extracted_value)
    if not ni or not ne:
        return MatchResult(False, 0, ni, ne)

    score = round(similarity(ni, ne), SCORE_PRECISION)
    return MatchResult(score >= min_score, score, ni, ne)


def match_aadhaar(input_value, extracted_value, min_score=THRESHOLDS[AADHAR]) -> MatchResult:
    """Match 12-digit Aadhaar numbers, ignoring spaces and separators."""
    return _match(only_digits, input_value, extracted_value, min_score)


def match_rc_number(input_value, extracted_value, min_score=THRESHOLDS[RC]) -> MatchResult:
    return _match(only_alphanumeric_upper, input_value, extracted_value, min_score)


def match_license_number(input_value, extracted_value, min_score=THRESHOLDS[LICENSE]) -> MatchResult:
    return _match(only_alphanumeric_upper, input_value, extracted_value, min_score)


_MATCHERS = {
    AADHAR: match_aadhaar,
    RC: match_rc_number,
    LICENSE: match_license_number,
}


def match(document_class: str, input_value, extracted_value) -> MatchResult:
    """Dispatch to the matcher for ``document_class`` (aadhar, rc or license)."""
    try:
        matcher = _MATCHERS[document_class]
    except KeyError:
        raise ValueError(f"No matcher for document class {document_class!r}")
    return matcher(input_value, extracted_value)


def mismatch_summary(label: str, input_value, extracted_value, result: MatchResult) -> str:
    """Short UI hint; empty when either side is missing or the values match."""
    if not input_value or not extracted_value:
        return ""
    if result is not None and result.is_match:
        return ""
    return f"{label} mismatch. Entered: {input_value} • Extracted: {extracted_value}"
