"""Initial schema — registry, offerings, rentals, outbound_transfers.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "registry",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("owner", sa.String(128), nullable=False),
        sa.Column("fee", sa.String(64), nullable=False),
        sa.Column("offering_counter", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("rental_counter", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "offerings",
        sa.Column("id", sa.String(40), primary_key=True),
        sa.Column("asset_contract", sa.String(128), nullable=False),
        sa.Column("seller", sa.String(128), nullable=False),
        sa.Column("amount", sa.String(40), nullable=False),
        sa.Column("price_denom", sa.String(128), nullable=False),
        sa.Column("price_amount", sa.String(40), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_offerings_seller", "offerings", ["seller"])

    op.create_table(
        "rentals",
        sa.Column("id", sa.String(40), primary_key=True),
        sa.Column("offering_id", sa.String(40), nullable=False),
        sa.Column("renter", sa.String(128), nullable=False),
        sa.Column("start_time", sa.String(20), nullable=False),
        sa.Column("end_time", sa.String(20), nullable=False),
        sa.Column("amount", sa.String(40), nullable=False),
    )
    op.create_index("ix_rentals_offering_id", "rentals", ["offering_id"])

    op.create_table(
        "outbound_transfers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("sequence", sa.Integer, nullable=False, server_default="0"),
        sa.Column("kind", sa.String(32), nullable=False),
        sa.Column("recipient", sa.String(128), nullable=False),
        sa.Column("denom", sa.String(128), nullable=True),
        sa.Column("asset_contract", sa.String(128), nullable=True),
        sa.Column("amount", sa.String(40), nullable=False),
        sa.Column("offering_id", sa.String(40), nullable=True),
        sa.Column("rental_id", sa.String(40), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("dispatched_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_outbound_transfers_status", "outbound_transfers", ["status"])


def downgrade() -> None:
    op.drop_index("ix_outbound_transfers_status", table_name="outbound_transfers")
    op.drop_table("outbound_transfers")
    op.drop_index("ix_rentals_offering_id", table_name="rentals")
    op.drop_table("rentals")
    op.drop_index("ix_offerings_seller", table_name="offerings")
    op.drop_table("offerings")
    op.drop_table("registry")
