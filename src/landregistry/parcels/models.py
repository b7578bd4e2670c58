"""Parcel data models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_serializer

GEO_HASH_LENGTH = 32
DOCS_HASH_LENGTH = 32


class OwnershipType(StrEnum):
    """Recognised forms of land tenure."""

    COMMUNAL = "communal"
    INDIVIDUAL = "individual"
    TRIBAL = "tribal"


class ParcelRegistration(BaseModel):
    """Fields submitted to register a parcel.

    Values are accepted as given; admission rules are applied by the parcel
    store so that every rejection maps to a specific error code.
    """

    geo_hash: bytes
    boundaries: str
    community_id: int
    description: str
    ownership_type: str
    area: int
    location: str
    docs_hash: bytes
    coordinates: str
    zone: str
    access_level: int


class Parcel(BaseModel):
    """A registered parcel of land."""

    model_config = ConfigDict(frozen=True)

    id: int
    geo_hash: bytes
    docs_hash: bytes
    boundaries: str
    description: str
    area: int
    community_id: int
    ownership_type: OwnershipType
    location: str
    coordinates: str
    zone: str
    access_level: int
    registrant: str
    timestamp: int
    status: bool = True

    @field_serializer("geo_hash", "docs_hash", when_used="json")
    def _hex(self, value: bytes) -> str:
        return value.hex()


class ParcelUpdate(BaseModel):
    """Latest amendment made to a parcel's mutable fields."""

    model_config = ConfigDict(frozen=True)

    boundaries: str
    description: str
    area: int
    updater: str
    timestamp: int


class StoreSnapshot(BaseModel):
    """Complete contents of a parcel store."""

    next_parcel_id: int = 0
    parcels: list[Parcel] = Field(default_factory=list)
    updates: dict[int, ParcelUpdate] = Field(default_factory=dict)
