"""Protocol definitions for registry persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from landregistry.parcels.models import Parcel, ParcelUpdate
from landregistry.registry.models import RegistrySnapshot, RegistryState


@runtime_checkable
class RegistryRepository(Protocol):
    """Protocol for storing and reloading registry state.

    Each save is all-or-nothing: a failing save leaves stored state untouched.
    """

    async def save_state(self, state: RegistryState) -> None: ...

    async def save_mutation(
        self,
        state: RegistryState,
        parcel: Parcel | None = None,
        update: ParcelUpdate | None = None,
    ) -> None: ...

    async def save_snapshot(self, snapshot: RegistrySnapshot) -> None: ...

    async def load_snapshot(self) -> RegistrySnapshot | None: ...
