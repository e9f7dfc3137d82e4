"""Add demo catalog references to leads

Revision ID: 003
Revises: 002
Create Date: 2026-10-20
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("leads", sa.Column("catalog_listing_id", sa.String(36), nullable=True))
    op.add_column("leads", sa.Column("catalog_service_id", sa.String(36), nullable=True))


def downgrade() -> None:
    op.drop_column("leads", "catalog_service_id")
    op.drop_column("leads", "catalog_listing_id")
