"""create events table

Revision ID: 20260110_create_events
Revises:
Create Date: 2026-01-10
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20260110_create_events"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("location", sa.String(length=100), nullable=False),
        sa.Column("start", sa.DateTime(timezone=False), nullable=False),
    )
    op.create_index("ix_events_id", "events", ["id"])

def downgrade() -> None:
    op.drop_index("ix_events_id", table_name="events")
    op.drop_table("events")
