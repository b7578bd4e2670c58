"""Registry-level state models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from landregistry.parcels.models import StoreSnapshot


class RegistryState(BaseModel):
    """Administrative state: authority, fee, id counter and last block seen."""

    authority: str | None = None
    registration_fee: int = Field(default=500, ge=0)
    next_parcel_id: int = Field(default=0, ge=0)
    block_height: int = Field(default=0, ge=0)


class RegistrySnapshot(BaseModel):
    """Everything needed to rebuild a registry: parcels plus admin state."""

    authority: str | None = None
    registration_fee: int = Field(default=500, ge=0)
    block_height: int = Field(default=0, ge=0)
    store: StoreSnapshot = Field(default_factory=StoreSnapshot)

    @property
    def state(self) -> RegistryState:
        return RegistryState(
            authority=self.authority,
            registration_fee=self.registration_fee,
            next_parcel_id=self.store.next_parcel_id,
            block_height=self.block_height,
        )
