"""PostgreSQL registry repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from landregistry.db.engine import DatabaseManager
from landregistry.db.models import ParcelRow, ParcelUpdateRow, RegistryStateRow
from landregistry.parcels.models import OwnershipType, Parcel, ParcelUpdate, StoreSnapshot
from landregistry.registry.models import RegistrySnapshot, RegistryState

_STATE_ROW_ID = 1


class PostgresRegistryRepository:
    """Postgres-backed storage for parcels, amendments and admin state.

    Every write method runs in one session with one commit, so a failed
    write leaves the stored registry exactly as it was.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def save_state(self, state: RegistryState) -> None:
        async with self._db.session() as db:
            await self._upsert_state(db, state)
            await db.commit()

    async def save_mutation(
        self,
        state: RegistryState,
        parcel: Parcel | None = None,
        update: ParcelUpdate | None = None,
    ) -> None:
        """Write the outcome of one registry call atomically.

        Args:
            state: Admin state after the call.
            parcel: The parcel the call created or amended, if any.
            update: The parcel's latest amendment, if it has one.
        """
        if update is not None and parcel is None:
            raise ValueError("An amendment can only be saved with its parcel")
        async with self._db.session() as db:
            if parcel is not None:
                await self._upsert_parcel(db, parcel)
                if update is not None:
                    # Parcel row must exist before its amendment references it
                    await db.flush()
                    await self._upsert_update(db, parcel.id, update)
            await self._upsert_state(db, state)
            await db.commit()

    async def save_snapshot(self, snapshot: RegistrySnapshot) -> None:
        async with self._db.session() as db:
            for parcel in snapshot.store.parcels:
                await self._upsert_parcel(db, parcel)
            await db.flush()
            for parcel_id, update in snapshot.store.updates.items():
                await self._upsert_update(db, parcel_id, update)
            await self._upsert_state(db, snapshot.state)
            await db.commit()

    async def load_snapshot(self) -> RegistrySnapshot | None:
        async with self._db.session() as db:
            state = await db.get(RegistryStateRow, _STATE_ROW_ID)
            if state is None:
                return None
            parcels = await db.execute(select(ParcelRow).order_by(ParcelRow.id))
            updates = await db.execute(select(ParcelUpdateRow))
            return RegistrySnapshot(
                authority=state.authority,
                registration_fee=state.registration_fee,
                block_height=state.block_height,
                store=StoreSnapshot(
                    next_parcel_id=state.next_parcel_id,
                    parcels=[self._row_to_parcel(r) for r in parcels.scalars().all()],
                    updates={
                        r.parcel_id: self._row_to_update(r) for r in updates.scalars().all()
                    },
                ),
            )

    @staticmethod
    async def _upsert_state(db: AsyncSession, state: RegistryState) -> None:
        existing = await db.get(RegistryStateRow, _STATE_ROW_ID)
        if existing:
            existing.authority = state.authority
            existing.registration_fee = state.registration_fee
            existing.next_parcel_id = state.next_parcel_id
            existing.block_height = state.block_height
        else:
            db.add(
                RegistryStateRow(
                    id=_STATE_ROW_ID,
                    authority=state.authority,
                    registration_fee=state.registration_fee,
                    next_parcel_id=state.next_parcel_id,
                    block_height=state.block_height,
                )
            )

    @staticmethod
    async def _upsert_parcel(db: AsyncSession, parcel: Parcel) -> None:
        existing = await db.get(ParcelRow, parcel.id)
        if existing:
            # Only the amendable fields ever change after registration
            existing.boundaries = parcel.boundaries
            existing.description = parcel.description
            existing.area = parcel.area
            existing.timestamp = parcel.timestamp
            existing.status = parcel.status
        else:
            db.add(
                ParcelRow(
                    id=parcel.id,
                    geo_hash=parcel.geo_hash,
                    docs_hash=parcel.docs_hash,
                    boundaries=parcel.boundaries,
                    description=parcel.description,
                    area=parcel.area,
                    community_id=parcel.community_id,
                    ownership_type=parcel.ownership_type.value,
                    location=parcel.location,
                    coordinates=parcel.coordinates,
                    zone=parcel.zone,
                    access_level=parcel.access_level,
                    registrant=parcel.registrant,
                    timestamp=parcel.timestamp,
                    status=parcel.status,
                )
            )

    @staticmethod
    async def _upsert_update(db: AsyncSession, parcel_id: int, update: ParcelUpdate) -> None:
        existing = await db.get(ParcelUpdateRow, parcel_id)
        if existing:
            existing.boundaries = update.boundaries
            existing.description = update.description
            existing.area = update.area
            existing.updater = update.updater
            existing.timestamp = update.timestamp
        else:
            db.add(
                ParcelUpdateRow(
                    parcel_id=parcel_id,
                    boundaries=update.boundaries,
                    description=update.description,
                    area=update.area,
                    updater=update.updater,
                    timestamp=update.timestamp,
                )
            )

    @staticmethod
    def _row_to_parcel(row: ParcelRow) -> Parcel:
        return Parcel(
            id=row.id,
            geo_hash=row.geo_hash,
            docs_hash=row.docs_hash,
            boundaries=row.boundaries,
            description=row.description,
            area=row.area,
            community_id=row.community_id,
            ownership_type=OwnershipType(row.ownership_type),
            location=row.location,
            coordinates=row.coordinates,
            zone=row.zone,
            access_level=row.access_level,
            registrant=row.registrant,
            timestamp=row.timestamp,
            status=row.status,
        )

    @staticmethod
    def _row_to_update(row: ParcelUpdateRow) -> ParcelUpdate:
        return ParcelUpdate(
            boundaries=row.boundaries,
            description=row.description,
            area=row.area,
            updater=row.updater,
            timestamp=row.timestamp,
        )
