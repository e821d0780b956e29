"""Initial schema — users, movies, unseen_movies, availability_slots, scheduled_events

Revision ID: 0001
Revises: —
Create Date: 2026-10-17 00:00:00
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")
TIME_SLOT = sa.Enum("afternoon", "evening", name="time_slot", native_enum=False)


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        # Normalized (lower-cased, trimmed) display name
        sa.Column("id", sa.String(length=30), primary_key=True),
        sa.Column("name", sa.String(length=30), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
    )

    # ── movies ────────────────────────────────────────────────────────────────
    op.create_table(
        "movies",
        sa.Column("tmdb_id", sa.String(length=20), primary_key=True),
        sa.Column("imdb_id", sa.String(length=20), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("year", sa.Integer, nullable=False, server_default="0"),
        sa.Column("poster_path", sa.String(length=255), nullable=True),
        sa.Column("overview", sa.Text, nullable=False, server_default=""),
        sa.Column("runtime", sa.Integer, nullable=True),
        sa.Column("genres", JSONType, nullable=False),
        sa.Column("director", sa.String(length=255), nullable=True),
        sa.Column("cast", JSONType, nullable=False),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column("fetched_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_movies_imdb_id", "movies", ["imdb_id"])
    op.create_index("ix_movies_title", "movies", ["title"])

    # ── unseen_movies ─────────────────────────────────────────────────────────
    # movie_id has no FK: lists may outlive catalog entries
    op.create_table(
        "unseen_movies",
        sa.Column("user_id", sa.String(length=30),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("movie_id", sa.String(length=20), primary_key=True),
        sa.Column("position", sa.Integer, nullable=False),
        sa.UniqueConstraint("user_id", "position", name="uq_unseen_user_position"),
        sa.CheckConstraint("position >= 0", name="chk_unseen_position_non_negative"),
    )
    op.create_index("idx_unseen_movies_movie", "unseen_movies", ["movie_id"])

    # ── availability_slots ────────────────────────────────────────────────────
    op.create_table(
        "availability_slots",
        sa.Column("user_id", sa.String(length=30),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("date", sa.Date, primary_key=True),
        sa.Column("slot", TIME_SLOT, primary_key=True),
        sa.Column("updated_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
    )

    # ── scheduled_events ──────────────────────────────────────────────────────
    op.create_table(
        "scheduled_events",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("movie_id", sa.String(length=20), nullable=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time_slot", TIME_SLOT, nullable=False),
        sa.Column("start_hour", sa.Integer, nullable=False),
        sa.Column("created_by", sa.String(length=30), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.func.now()),
        sa.Column("watched", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("attendees", JSONType, nullable=False),
        sa.CheckConstraint("start_hour BETWEEN 13 AND 21", name="chk_event_start_hour"),
    )
    op.create_index("ix_scheduled_events_date", "scheduled_events", ["date"])


def downgrade() -> None:
    op.drop_index("ix_scheduled_events_date", table_name="scheduled_events")
    op.drop_table("scheduled_events")
    op.drop_table("availability_slots")
    op.drop_index("idx_unseen_movies_movie", table_name="unseen_movies")
    op.drop_table("unseen_movies")
    op.drop_index("ix_movies_title", table_name="movies")
    op.drop_index("ix_movies_imdb_id", table_name="movies")
    op.drop_table("movies")
    op.drop_table("users")
