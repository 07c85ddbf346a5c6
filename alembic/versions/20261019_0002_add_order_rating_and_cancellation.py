"""add rating and cancellation reasons to orders

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 15:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("orders", sa.Column("rating", sa.Float(), nullable=True))
    op.add_column("orders", sa.Column("cancellation_reasons", sa.JSON(), nullable=True))


def downgrade() -> None:
    op.drop_column("orders", "cancellation_reasons")
    op.drop_column("orders", "rating")
