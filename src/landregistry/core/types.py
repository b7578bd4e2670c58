"""Core type definitions shared across all registry modules."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(IntEnum):
    """Numeric rejection codes returned by registry operations."""

    UNAUTHORIZED = 100
    DUPLICATE_PARCEL = 101
    NOT_FOUND = 102
    INVALID_HASH = 103
    INVALID_BOUNDARIES = 104
    INVALID_COMMUNITY_ID = 105
    INVALID_DESCRIPTION = 106
    TRANSFER_FAILED = 107
    AUTHORITY_NOT_VERIFIED = 108
    INVALID_OWNERSHIP_TYPE = 109
    INVALID_AREA = 110
    INVALID_LOCATION = 111
    AUTHORITY_NOT_CONFIGURED = 112
    MAX_PARCELS_EXCEEDED = 113
    INVALID_UPDATE_PARAM = 114
    AUTHORITY_ALREADY_SET = 115
    RESERVED_IDENTITY = 116
    INVALID_DOCS_HASH = 117
    INVALID_COORDINATES = 118
    INVALID_ZONE = 119
    INVALID_ACCESS_LEVEL = 120


class LedgerContext(BaseModel):
    """Caller identity and logical time of a single request."""

    caller: str
    block_height: int = Field(default=0, ge=0)


class RegistryResult(BaseModel):
    """Discriminated outcome of a registry operation.

    ``ok`` is True when the operation committed; ``value`` then carries the
    operation's return value. On rejection ``error`` names the cause and no
    state has changed.
    """

    ok: bool
    value: Any = None
    error: ErrorCode | None = None

    @classmethod
    def success(cls, value: Any = True) -> RegistryResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorCode) -> RegistryResult:
        return cls(ok=False, value=None, error=error)


class AuditEvent(BaseModel):
    """Immutable audit log entry for a committed registry mutation."""

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    block_height: int = 0
    actor: str
    action: str
    resource: str
    details: dict[str, Any] = Field(default_factory=dict)


class HealthStatus(BaseModel):
    """Health check response for any service."""

    service: str
    healthy: bool
    details: dict[str, Any] = Field(default_factory=dict)
