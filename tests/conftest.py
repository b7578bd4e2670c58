"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from landregistry.core.config import RegistryConfig
from landregistry.core.types import LedgerContext
from landregistry.finance.transfer import InMemoryLedger
from landregistry.parcels.models import ParcelRegistration
from landregistry.registry.service import LandRegistry

REGISTRANT = "ST1TEST"
AUTHORITY = "ST2TEST"
STRANGER = "ST3FAKE"
BURN_IDENTITY = "SP000000000000000000002Q6VF78"

GEO_HASH = bytes([1]) * 32
DOCS_HASH = bytes([2]) * 32


def parcel_kwargs(**overrides: Any) -> dict[str, Any]:
    """Valid registration keyword arguments, with optional overrides."""
    values: dict[str, Any] = {
        "geo_hash": GEO_HASH,
        "boundaries": "bounds",
        "community_id": 1,
        "description": "desc",
        "ownership_type": "communal",
        "area": 100,
        "location": "loc",
        "docs_hash": DOCS_HASH,
        "coordinates": "coords",
        "zone": "zone",
        "access_level": 1,
    }
    values.update(overrides)
    return values


@pytest.fixture
def make_fields() -> Callable[..., ParcelRegistration]:
    def factory(**overrides: Any) -> ParcelRegistration:
        return ParcelRegistration(**parcel_kwargs(**overrides))

    return factory


@pytest.fixture
def ctx() -> LedgerContext:
    return LedgerContext(caller=REGISTRANT, block_height=0)


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def registry(ledger: InMemoryLedger) -> LandRegistry:
    return LandRegistry(transfer=ledger, config=RegistryConfig())


@pytest.fixture
def configured_registry(registry: LandRegistry, ctx: LedgerContext) -> LandRegistry:
    """Registry with AUTHORITY already set."""
    assert registry.set_authority_contract(ctx, AUTHORITY).ok
    return registry


@pytest.fixture
def make_kwargs() -> Callable[..., dict[str, Any]]:
    return parcel_kwargs
