"""Admission and amendment rules for parcels.

Registration rules run in a fixed order and the first failing rule decides
the error code, so clients always see the same code for the same input.
"""

from __future__ import annotations

from typing import Callable

from landregistry.core.types import ErrorCode
from landregistry.parcels.models import (
    DOCS_HASH_LENGTH,
    GEO_HASH_LENGTH,
    OwnershipType,
    ParcelRegistration,
)

MAX_BOUNDARIES_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 1000
MAX_LOCATION_LENGTH = 200
MAX_COORDINATES_LENGTH = 500
MAX_ZONE_LENGTH = 100
MAX_ACCESS_LEVEL = 3

_OWNERSHIP_TYPES = frozenset(t.value for t in OwnershipType)

# Ordered field rules: (predicate that must hold, code when it doesn't)
FieldRule = tuple[Callable[[ParcelRegistration], bool], ErrorCode]


def valid_boundaries(value: str) -> bool:
    return 0 < len(value) <= MAX_BOUNDARIES_LENGTH


def valid_description(value: str) -> bool:
    return len(value) <= MAX_DESCRIPTION_LENGTH


def valid_area(value: int) -> bool:
    return value > 0


FIELD_RULES: list[FieldRule] = [
    (lambda f: len(f.geo_hash) == GEO_HASH_LENGTH, ErrorCode.INVALID_HASH),
    (lambda f: valid_boundaries(f.boundaries), ErrorCode.INVALID_BOUNDARIES),
    (lambda f: f.community_id > 0, ErrorCode.INVALID_COMMUNITY_ID),
    (lambda f: valid_description(f.description), ErrorCode.INVALID_DESCRIPTION),
    (lambda f: f.ownership_type in _OWNERSHIP_TYPES, ErrorCode.INVALID_OWNERSHIP_TYPE),
    (lambda f: valid_area(f.area), ErrorCode.INVALID_AREA),
    (lambda f: 0 < len(f.location) <= MAX_LOCATION_LENGTH, ErrorCode.INVALID_LOCATION),
    (lambda f: len(f.docs_hash) == DOCS_HASH_LENGTH, ErrorCode.INVALID_DOCS_HASH),
    (lambda f: 0 < len(f.coordinates) <= MAX_COORDINATES_LENGTH, ErrorCode.INVALID_COORDINATES),
    (lambda f: len(f.zone) <= MAX_ZONE_LENGTH, ErrorCode.INVALID_ZONE),
    # access level is unsigned, so negatives are out of range too
    (lambda f: 0 <= f.access_level <= MAX_ACCESS_LEVEL, ErrorCode.INVALID_ACCESS_LEVEL),
]


def check_fields(fields: ParcelRegistration) -> ErrorCode | None:
    """Return the code of the first field rule ``fields`` breaks, if any."""
    for predicate, code in FIELD_RULES:
        if not predicate(fields):
            return code
    return None


def check_amendment(boundaries: str, description: str, area: int) -> bool:
    """True when an amendment's new mutable values are acceptable."""
    return (
        valid_boundaries(boundaries)
        and valid_description(description)
        and valid_area(area)
    )
