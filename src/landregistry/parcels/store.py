"""In-memory parcel store with a geoHash uniqueness index."""

from __future__ import annotations

from landregistry.core.types import ErrorCode
from landregistry.parcels.models import (
    OwnershipType,
    Parcel,
    ParcelRegistration,
    ParcelUpdate,
    StoreSnapshot,
)
from landregistry.parcels.validation import check_amendment, check_fields


class ParcelStore:
    """Primary parcel table, geoHash index and latest-amendment table.

    Validation and mutation are split: callers run ``validate_*`` first and
    only call ``insert``/``apply_update`` once validation has passed. Between
    the two nothing else may touch the store.
    """

    def __init__(self, max_parcels: int = 5000) -> None:
        if max_parcels < 0:
            raise ValueError(f"max_parcels must be non-negative, got {max_parcels}")
        self._max_parcels = max_parcels
        self._parcels: dict[int, Parcel] = {}
        self._by_hash: dict[bytes, int] = {}
        self._updates: dict[int, ParcelUpdate] = {}
        self._next_id = 0

    @property
    def max_parcels(self) -> int:
        return self._max_parcels

    # -- Registration --

    def validate_for_registration(
        self, fields: ParcelRegistration, authority_configured: bool
    ) -> ErrorCode | None:
        if self._next_id >= self._max_parcels:
            return ErrorCode.MAX_PARCELS_EXCEEDED
        code = check_fields(fields)
        if code is not None:
            return code
        if bytes(fields.geo_hash) in self._by_hash:
            return ErrorCode.DUPLICATE_PARCEL
        if not authority_configured:
            return ErrorCode.AUTHORITY_NOT_VERIFIED
        return None

    def insert(self, fields: ParcelRegistration, registrant: str, now: int) -> int:
        geo_hash = bytes(fields.geo_hash)
        parcel_id = self._next_id
        parcel = Parcel(
            id=parcel_id,
            geo_hash=geo_hash,
            docs_hash=bytes(fields.docs_hash),
            boundaries=fields.boundaries,
            description=fields.description,
            area=fields.area,
            community_id=fields.community_id,
            ownership_type=OwnershipType(fields.ownership_type),
            location=fields.location,
            coordinates=fields.coordinates,
            zone=fields.zone,
            access_level=fields.access_level,
            registrant=registrant,
            timestamp=now,
            status=True,
        )
        self._parcels[parcel_id] = parcel
        self._by_hash[geo_hash] = parcel_id
        self._next_id += 1
        return parcel_id

    # -- Amendment --

    def validate_for_update(
        self,
        parcel_id: int,
        caller: str,
        boundaries: str,
        description: str,
        area: int,
    ) -> ErrorCode | None:
        parcel = self._parcels.get(parcel_id)
        if parcel is None:
            return ErrorCode.NOT_FOUND
        if parcel.registrant != caller:
            return ErrorCode.UNAUTHORIZED
        if not check_amendment(boundaries, description, area):
            return ErrorCode.INVALID_UPDATE_PARAM
        return None

    def apply_update(
        self,
        parcel_id: int,
        boundaries: str,
        description: str,
        area: int,
        updater: str,
        now: int,
    ) -> None:
        parcel = self._parcels[parcel_id]
        self._parcels[parcel_id] = parcel.model_copy(
            update={
                "boundaries": boundaries,
                "description": description,
                "area": area,
                "timestamp": now,
            }
        )
        self._updates[parcel_id] = ParcelUpdate(
            boundaries=boundaries,
            description=description,
            area=area,
            updater=updater,
            timestamp=now,
        )

    # -- Reads --

    def get(self, parcel_id: int) -> Parcel | None:
        return self._parcels.get(parcel_id)

    def get_update(self, parcel_id: int) -> ParcelUpdate | None:
        return self._updates.get(parcel_id)

    def count(self) -> int:
        return self._next_id

    def exists(self, geo_hash: bytes) -> bool:
        return bytes(geo_hash) in self._by_hash

    def id_for_hash(self, geo_hash: bytes) -> int | None:
        return self._by_hash.get(bytes(geo_hash))

    def list_parcels(self) -> list[Parcel]:
        return [self._parcels[i] for i in sorted(self._parcels)]

    # -- Snapshots --

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            next_parcel_id=self._next_id,
            parcels=self.list_parcels(),
            updates=dict(self._updates),
        )

    def restore(self, snapshot: StoreSnapshot) -> None:
        """Replace the store contents with ``snapshot``.

        Raises:
            ValueError: If the snapshot breaks a store invariant.
        """
        parcels: dict[int, Parcel] = {}
        by_hash: dict[bytes, int] = {}
        for parcel in snapshot.parcels:
            if parcel.id in parcels:
                raise ValueError(f"Duplicate parcel id {parcel.id} in snapshot")
            if parcel.geo_hash in by_hash:
                raise ValueError(f"Duplicate geo hash for parcel {parcel.id} in snapshot")
            parcels[parcel.id] = parcel
            by_hash[parcel.geo_hash] = parcel.id

        if sorted(parcels) != list(range(snapshot.next_parcel_id)):
            raise ValueError("Snapshot parcel ids are not dense from zero to next_parcel_id")
        if snapshot.next_parcel_id > self._max_parcels:
            raise ValueError(
                f"Snapshot holds {snapshot.next_parcel_id} parcels, "
                f"more than max_parcels={self._max_parcels}"
            )
        orphaned = set(snapshot.updates) - set(parcels)
        if orphaned:
            raise ValueError(f"Snapshot has updates for unknown parcels: {sorted(orphaned)}")

        self._parcels = parcels
        self._by_hash = by_hash
        self._updates = dict(snapshot.updates)
        self._next_id = snapshot.next_parcel_id
