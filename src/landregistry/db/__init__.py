"""Database layer for the parcel registry: SQLAlchemy 2.0 async."""

from __future__ import annotations

from landregistry.db.base import Base
from landregistry.db.engine import DatabaseManager

__all__ = ["Base", "DatabaseManager"]
