"""Speakers table.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the speakers table."""
    op.create_table(
        "speakers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("organization", sa.String(200), nullable=True),
        sa.Column("biography", sa.Text, nullable=True),
        sa.Column("picture", sa.Text, nullable=True),
        sa.Column("twitter_handle", sa.String(100), nullable=True),
    )
    op.create_index("ix_speakers_name", "speakers", ["name"])


def downgrade() -> None:
    """Drop the speakers table."""
    op.drop_index("ix_speakers_name", table_name="speakers")
    op.drop_table("speakers")
