"""
Simulated document authority.

Stands in for the RC, insurance, driving licence and Aadhaar registries.
The table is immutable and built once at import time, so any number of
request handlers can read it concurrently.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

RC = "rc"
INSURANCE = "insurance"
LICENSE = "license"
AADHAR = "aadhar"

DOCUMENT_CLASSES = (RC, INSURANCE, LICENSE, AADHAR)


@dataclass(frozen=True)
class RegistryRecord:
    """What the authority says about one identifier."""
    is_valid: bool
    claimed_owner_name: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)


UNKNOWN = RegistryRecord(is_valid=False)


def _freeze(table):
    return MappingProxyType({
        doc_class: MappingProxyType({
            identifier: RegistryRecord(
                is_valid=row["is_valid"],
                claimed_owner_name=row.get("name"),
                details=MappingProxyType({
                    k: v for k, v in row.items() if k not in ("is_valid", "name")
                }),
            )
            for identifier, row in rows.items()
        })
        for doc_class, rows in table.items()
    })


_REGISTRY = _freeze({
    RC: {
        "DL12AB1234": {"is_valid": True, "name": "John Doe"},
        "UP56CD5678": {"is_valid": False, "name": "Jane Smith"},
    },
    INSURANCE: {
        "INS987654321": {"is_valid": True, "name": "John Doe"},
        "INS123456789": {"is_valid": False, "name": "Jane Smith"},
    },
    LICENSE: {
        "DL9876543210": {
            "is_valid": True, "name": "John Doe",
            "dob": "1990-05-15", "validity": "2030-05-15",
        },
        "DL0123456789": {
            "is_valid": False, "name": "Jane Smith",
            "dob": "1985-11-20", "validity": "2020-11-20",
        },
    },
    AADHAR: {
        "123456789012": {"is_valid": True, "name": "John Doe"},
        "987654321098": {"is_valid": True, "name": "Jane Smith"},
        "111122223333": {"is_valid": False, "name": "Fake User"},
    },
})


def lookup(document_class: str, identifier: Optional[str]) -> RegistryRecord:
    """
    Look up a document identifier.

    Unknown document classes and identifiers absent from the table both
    resolve to ``UNKNOWN``, which is never valid.
    """
    if not identifier:
        return UNKNOWN
    table = _REGISTRY.get(document_class)
    if table is None:
        return UNKNOWN
    return table.get(str(identifier).strip(), UNKNOWN)


def is_valid(document_class: str, identifier: Optional[str]) -> bool:
    return lookup(document_class, identifier).is_valid
