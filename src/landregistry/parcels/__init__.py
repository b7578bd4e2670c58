"""Parcel records, admission rules and the parcel store."""

from landregistry.parcels.models import (
    OwnershipType,
    Parcel,
    ParcelRegistration,
    ParcelUpdate,
    StoreSnapshot,
)
from landregistry.parcels.store import ParcelStore

__all__ = [
    "OwnershipType",
    "Parcel",
    "ParcelRegistration",
    "ParcelStore",
    "ParcelUpdate",
    "StoreSnapshot",
]
