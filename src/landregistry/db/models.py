"""SQLAlchemy ORM models for persisted registry state."""

from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from landregistry.db.base import Base


# ---------------------------------------------------------------------------
# Registry administration
# ---------------------------------------------------------------------------


class RegistryStateRow(Base):
    """Single-row table holding authority, fee, the id counter and block height."""

    __tablename__ = "registry_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    authority: Mapped[str | None] = mapped_column(String(128), nullable=True)
    registration_fee: Mapped[int] = mapped_column(BigInteger, default=500)
    next_parcel_id: Mapped[int] = mapped_column(Integer, default=0)
    block_height: Mapped[int] = mapped_column(BigInteger, default=0)


# ---------------------------------------------------------------------------
# Parcels & amendments
# ---------------------------------------------------------------------------


class ParcelRow(Base):
    __tablename__ = "parcels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    geo_hash: Mapped[bytes] = mapped_column(LargeBinary(32), unique=True)
    docs_hash: Mapped[bytes] = mapped_column(LargeBinary(32))
    boundaries: Mapped[str] = mapped_column(String(500))
    description: Mapped[str] = mapped_column(Text, default="")
    area: Mapped[int] = mapped_column(BigInteger)
    community_id: Mapped[int] = mapped_column(Integer)
    ownership_type: Mapped[str] = mapped_column(String(16))
    location: Mapped[str] = mapped_column(String(200))
    coordinates: Mapped[str] = mapped_column(String(500))
    zone: Mapped[str] = mapped_column(String(100), default="")
    access_level: Mapped[int] = mapped_column(Integer, default=0)
    registrant: Mapped[str] = mapped_column(String(128))
    timestamp: Mapped[int] = mapped_column(Integer)
    status: Mapped[bool] = mapped_column(Boolean, default=True)

    __table_args__ = (
        Index("ix_parcels_registrant", "registrant"),
        Index("ix_parcels_community_id", "community_id"),
    )


class ParcelUpdateRow(Base):
    """Latest amendment per parcel; replaced on every amendment."""

    __tablename__ = "parcel_updates"

    parcel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("parcels.id", ondelete="CASCADE"), primary_key=True
    )
    boundaries: Mapped[str] = mapped_column(String(500))
    description: Mapped[str] = mapped_column(Text, default="")
    area: Mapped[int] = mapped_column(BigInteger)
    updater: Mapped[str] = mapped_column(String(128))
    timestamp: Mapped[int] = mapped_column(Integer)
