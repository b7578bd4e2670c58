"""Finance data models for registration fees and value transfers."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class TransferRecord(BaseModel):
    """A value transfer that the ledger completed."""

    amount: int
    sender: str
    recipient: str
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
