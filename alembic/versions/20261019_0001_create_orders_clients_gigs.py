"""create orders, clients and gigs tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "order_id",
            sa.String(),
            nullable=False,
            comment="External order identifier from the income source",
        ),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("gig_name", sa.String(), nullable=False),
        sa.Column("client_username", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            "source",
            sa.String(length=255),
            nullable=False,
            comment="Income source (marketplace / channel) label",
        ),
        sa.Column("order_type", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_orders"),
        sa.UniqueConstraint("order_id", name="uq_orders_order_id"),
    )
    op.create_index("ix_orders_order_date", "orders", ["order_date"], unique=False)
    op.create_index("ix_orders_source", "orders", ["source"], unique=False)
    op.create_index("ix_orders_client_username", "orders", ["client_username"], unique=False)

    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column(
            "source",
            sa.String(length=255),
            nullable=True,
            comment="Income source the client was first seen on",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_clients"),
        sa.UniqueConstraint("username", name="uq_clients_username"),
    )

    op.create_table(
        "gigs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("source", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_gigs"),
        sa.UniqueConstraint("source", "name", name="uq_gigs_source_name"),
    )


def downgrade() -> None:
    op.drop_table("gigs")
    op.drop_table("clients")
    op.drop_index("ix_orders_client_username", table_name="orders")
    op.drop_index("ix_orders_source", table_name="orders")
    op.drop_index("ix_orders_order_date", table_name="orders")
    op.drop_table("orders")
