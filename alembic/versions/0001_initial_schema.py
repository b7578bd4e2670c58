"""Initial schema: registry state, parcels and parcel amendments.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # -- Registry state (single row) --
    op.create_table(
        "registry_state",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("authority", sa.String(128), nullable=True),
        sa.Column("registration_fee", sa.BigInteger, nullable=False, server_default="500"),
        sa.Column("next_parcel_id", sa.Integer, nullable=False, server_default="0"),
    )

    # -- Parcels --
    op.create_table(
        "parcels",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("geo_hash", sa.LargeBinary(32), nullable=False, unique=True),
        sa.Column("docs_hash", sa.LargeBinary(32), nullable=False),
        sa.Column("boundaries", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("area", sa.BigInteger, nullable=False),
        sa.Column("community_id", sa.Integer, nullable=False),
        sa.Column("ownership_type", sa.String(16), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("coordinates", sa.String(500), nullable=False),
        sa.Column("zone", sa.String(100), nullable=False, server_default=""),
        sa.Column("access_level", sa.Integer, nullable=False, server_default="0"),
        sa.Column("registrant", sa.String(128), nullable=False),
        sa.Column("timestamp", sa.Integer, nullable=False),
        sa.Column("status", sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_parcels_registrant", "parcels", ["registrant"])
    op.create_index("ix_parcels_community_id", "parcels", ["community_id"])

    # -- Parcel amendments (latest only) --
    op.create_table(
        "parcel_updates",
        sa.Column(
            "parcel_id",
            sa.Integer,
            sa.ForeignKey("parcels.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("boundaries", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("area", sa.BigInteger, nullable=False),
        sa.Column("updater", sa.String(128), nullable=False),
        sa.Column("timestamp", sa.Integer, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("parcel_updates")
    op.drop_index("ix_parcels_community_id", table_name="parcels")
    op.drop_index("ix_parcels_registrant", table_name="parcels")
    op.drop_table("parcels")
    op.drop_table("registry_state")
