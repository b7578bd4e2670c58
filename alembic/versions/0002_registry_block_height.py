"""Persist the registry's block height.

Without it, block heights restart from zero after a restart and new
amendments could be stamped earlier than the registration they amend.
Existing rows resume from their newest parcel or amendment timestamp.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "registry_state",
        sa.Column("block_height", sa.BigInteger, nullable=False, server_default="0"),
    )
    op.execute(
        sa.text(
            "UPDATE registry_state SET block_height = COALESCE(("
            "SELECT MAX(ts) FROM ("
            "SELECT timestamp AS ts FROM parcels "
            "UNION ALL SELECT timestamp AS ts FROM parcel_updates"
            ") AS stamps), 0)"
        )
    )


def downgrade() -> None:
    op.drop_column("registry_state", "block_height")
