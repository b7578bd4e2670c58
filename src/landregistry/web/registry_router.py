"""Registry API router for parcel registration, amendment and lookups."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from landregistry.core.types import ErrorCode, LedgerContext, RegistryResult
from landregistry.parcels.models import Parcel, ParcelRegistration
from landregistry.registry.models import RegistrySnapshot
from landregistry.registry.service import LandRegistry
from landregistry.web.middleware import require_caller

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class AuthorityRequest(BaseModel):
    """Request body for setting the registry authority."""

    identity: str


class FeeRequest(BaseModel):
    """Request body for changing the registration fee."""

    fee: int


class RegisterParcelRequest(BaseModel):
    """Request body for registering a parcel. Hashes are hex encoded."""

    geo_hash: str
    boundaries: str
    community_id: int
    description: str = ""
    ownership_type: str
    area: int
    location: str
    docs_hash: str
    coordinates: str
    zone: str = ""
    access_level: int = 0


class UpdateParcelRequest(BaseModel):
    """Request body for amending a parcel's mutable fields."""

    boundaries: str
    description: str = ""
    area: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_STATUS_BY_ERROR: dict[ErrorCode, int] = {
    ErrorCode.UNAUTHORIZED: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.DUPLICATE_PARCEL: 409,
    ErrorCode.AUTHORITY_ALREADY_SET: 409,
    ErrorCode.TRANSFER_FAILED: 402,
}


def _get_registry(request: Request) -> LandRegistry:
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Registry not available")
    return registry


def _get_lock(request: Request) -> asyncio.Lock:
    return request.app.state.registry_lock


def _context(request: Request, caller: str) -> LedgerContext:
    return LedgerContext(caller=caller, block_height=request.app.state.clock.advance())


def _raise_for(result: RegistryResult) -> None:
    if result.ok:
        return
    code = result.error
    raise HTTPException(
        status_code=_STATUS_BY_ERROR.get(code, 400),
        detail={"error": code.name, "code": int(code)},
    )


def _decode_hash(value: str) -> bytes:
    # Undecodable text becomes an empty hash so ordered validation picks the code
    try:
        return bytes.fromhex(value)
    except ValueError:
        return b""


def _parcel_to_dict(parcel: Parcel) -> dict[str, Any]:
    return parcel.model_dump(mode="json")


def _checkpoint(request: Request, registry: LandRegistry) -> RegistrySnapshot | None:
    """Snapshot taken before a mutation, when there is storage to keep in step."""
    if getattr(request.app.state, "registry_repository", None) is None:
        return None
    return registry.snapshot()


async def _persist(
    request: Request,
    registry: LandRegistry,
    ctx: LedgerContext,
    before: RegistrySnapshot | None,
    parcel_id: int | None = None,
    refund: int = 0,
) -> None:
    """Store a committed mutation, or roll the registry back if storing fails."""
    repo = getattr(request.app.state, "registry_repository", None)
    if repo is None or before is None:
        return
    parcel = update = None
    if parcel_id is not None:
        parcel = registry.get_parcel(parcel_id)
        update = registry.get_parcel_update(parcel_id)
    try:
        await repo.save_mutation(registry.state(), parcel, update)
    except Exception as exc:
        logger.exception(
            "Persisting call by %s at block %d failed; rolling back",
            ctx.caller, ctx.block_height,
        )
        registry.rollback(before, ctx, refund=refund)
        raise HTTPException(status_code=503, detail="Registry storage unavailable") from exc


# ---------------------------------------------------------------------------
# Administration
# ---------------------------------------------------------------------------


@router.post("/api/registry/authority")
async def api_set_authority(
    body: AuthorityRequest, request: Request, caller: str = Depends(require_caller)
) -> dict[str, Any]:
    """Set the one-time registry authority."""
    registry = _get_registry(request)
    async with _get_lock(request):
        ctx = _context(request, caller)
        before = _checkpoint(request, registry)
        _raise_for(registry.set_authority_contract(ctx, body.identity))
        await _persist(request, registry, ctx, before)
    return {"authority": registry.authority}


@router.get("/api/registry/authority/verify/{identity}")
async def api_verify_authority(identity: str, request: Request) -> dict[str, Any]:
    """Check whether an identity is a verified authority."""
    registry = _get_registry(request)
    return {"identity": identity, "verified": registry.is_verified_authority(identity)}


@router.get("/api/registry/fee")
async def api_get_fee(request: Request) -> dict[str, Any]:
    registry = _get_registry(request)
    return {"fee": registry.registration_fee}


@router.put("/api/registry/fee")
async def api_set_fee(
    body: FeeRequest, request: Request, caller: str = Depends(require_caller)
) -> dict[str, Any]:
    """Change the registration fee once an authority is configured."""
    if body.fee < 0:
        raise HTTPException(status_code=400, detail="Fee must be non-negative")
    registry = _get_registry(request)
    async with _get_lock(request):
        ctx = _context(request, caller)
        before = _checkpoint(request, registry)
        _raise_for(registry.set_registration_fee(ctx, body.fee))
        await _persist(request, registry, ctx, before)
    return {"fee": registry.registration_fee}


# ---------------------------------------------------------------------------
# Parcels
# ---------------------------------------------------------------------------


@router.post("/api/registry/parcels", status_code=201)
async def api_register_parcel(
    body: RegisterParcelRequest, request: Request, caller: str = Depends(require_caller)
) -> dict[str, Any]:
    """Register a parcel, collecting the registration fee from the caller."""
    registry = _get_registry(request)
    fields = ParcelRegistration(
        geo_hash=_decode_hash(body.geo_hash),
        boundaries=body.boundaries,
        community_id=body.community_id,
        description=body.description,
        ownership_type=body.ownership_type,
        area=body.area,
        location=body.location,
        docs_hash=_decode_hash(body.docs_hash),
        coordinates=body.coordinates,
        zone=body.zone,
        access_level=body.access_level,
    )
    async with _get_lock(request):
        ctx = _context(request, caller)
        before = _checkpoint(request, registry)
        fee = registry.registration_fee
        result = registry.register(ctx, fields)
        _raise_for(result)
        await _persist(request, registry, ctx, before, parcel_id=result.value, refund=fee)
    return {"parcel_id": result.value}


@router.get("/api/registry/parcels")
async def api_list_parcels(request: Request) -> list[dict[str, Any]]:
    registry = _get_registry(request)
    return [_parcel_to_dict(p) for p in registry.list_parcels()]


@router.get("/api/registry/parcels/count")
async def api_parcel_count(request: Request) -> dict[str, Any]:
    registry = _get_registry(request)
    return {"count": registry.get_parcel_count()}


@router.get("/api/registry/parcels/exists/{geo_hash}")
async def api_parcel_exists(geo_hash: str, request: Request) -> dict[str, Any]:
    registry = _get_registry(request)
    return {
        "geo_hash": geo_hash,
        "exists": registry.check_parcel_existence(_decode_hash(geo_hash)),
    }


@router.get("/api/registry/parcels/{parcel_id}")
async def api_get_parcel(parcel_id: int, request: Request) -> dict[str, Any]:
    registry = _get_registry(request)
    parcel = registry.get_parcel(parcel_id)
    if parcel is None:
        raise HTTPException(status_code=404, detail=f"Parcel {parcel_id} not found")
    return _parcel_to_dict(parcel)


@router.get("/api/registry/parcels/{parcel_id}/update")
async def api_get_parcel_update(parcel_id: int, request: Request) -> dict[str, Any]:
    """Get the latest amendment recorded for a parcel."""
    registry = _get_registry(request)
    update = registry.get_parcel_update(parcel_id)
    if update is None:
        raise HTTPException(status_code=404, detail=f"Parcel {parcel_id} has no amendments")
    return update.model_dump(mode="json")


@router.get("/api/registry/parcels/{parcel_id}/history")
async def api_get_parcel_history(parcel_id: int, request: Request) -> list[dict[str, Any]]:
    """Every logged event for a parcel, from the hash-chained audit log."""
    registry = _get_registry(request)
    audit_logger = getattr(request.app.state, "audit_logger", None)
    if audit_logger is None:
        raise HTTPException(status_code=503, detail="Audit log is disabled")
    if registry.get_parcel(parcel_id) is None:
        raise HTTPException(status_code=404, detail=f"Parcel {parcel_id} not found")
    return [e.model_dump(mode="json") for e in audit_logger.parcel_history(parcel_id)]


@router.patch("/api/registry/parcels/{parcel_id}")
async def api_update_parcel(
    parcel_id: int,
    body: UpdateParcelRequest,
    request: Request,
    caller: str = Depends(require_caller),
) -> dict[str, Any]:
    """Amend a parcel's boundaries, description and area. Registrant only."""
    registry = _get_registry(request)
    async with _get_lock(request):
        ctx = _context(request, caller)
        before = _checkpoint(request, registry)
        _raise_for(
            registry.update_parcel(ctx, parcel_id, body.boundaries, body.description, body.area)
        )
        await _persist(request, registry, ctx, before, parcel_id=parcel_id)
    return _parcel_to_dict(registry.get_parcel(parcel_id))
