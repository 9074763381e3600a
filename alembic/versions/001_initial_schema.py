"""Initial schema: users directory and per-schedule document rows.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text, nullable=False, server_default=""),
    )

    op.create_table(
        "schedule_data",
        sa.Column("schedule_id", UUID(as_uuid=True), nullable=False),
        sa.Column("data", sa.LargeBinary, nullable=False),
        sa.PrimaryKeyConstraint("schedule_id", name="schedule_data_pkey"),
    )


def downgrade() -> None:
    op.drop_table("schedule_data")
    op.drop_table("users")
