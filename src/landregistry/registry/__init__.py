"""Registry façade orchestrating authority, fees, transfers and parcels."""

from landregistry.registry.models import RegistrySnapshot, RegistryState
from landregistry.registry.service import LandRegistry

__all__ = ["LandRegistry", "RegistrySnapshot", "RegistryState"]
