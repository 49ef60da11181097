"""Initial watchlog schema.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the watch entry log, per-series progress documents and users.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "watch_entries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False, index=True),
        sa.Column("watch_date", sa.String(10), nullable=False, index=True),
        sa.Column("kind", sa.String(10), nullable=False, index=True),
        sa.Column("rating", sa.Integer, default=0),
        sa.Column("watch_again", sa.Boolean, default=False),
        sa.Column("platform", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=True),
        sa.Column("season", sa.Integer, nullable=True),
        sa.Column("episode", sa.Integer, nullable=True),
        sa.Column("cover_image", sa.String(512), nullable=True),
        sa.Column("genres", sa.Text, nullable=True),
        sa.Column("tmdb_id", sa.Integer, nullable=True, index=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )

    # One JSON document per series, keyed by season and episode number
    op.create_table(
        "series_progress",
        sa.Column("series_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("seasons", sa.Text, nullable=False, server_default="{}"),
        sa.Column("episodes", sa.Text, nullable=False, server_default="{}"),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("profile_image_url", sa.String(512), nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_table("series_progress")
    op.drop_table("watch_entries")
