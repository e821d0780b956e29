"""
SQLAlchemy ORM models.

Column types are portable: JSON gets the JSONB variant on Postgres and ids
use the generic Uuid type, so the same models back the SQLite dev database
and the test suite.

A user's unseen list is stored one row per movie with an integer position.
The list is always rewritten as a whole, never patched element by element.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, relationship


# ── Base ──────────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


JSONType = JSON().with_variant(JSONB(), "postgresql")


# ── Enums ─────────────────────────────────────────────────────────────────────

class TimeSlotEnum(str, PyEnum):
    afternoon = "afternoon"
    evening = "evening"


# ── Timestamp helper ──────────────────────────────────────────────────────────

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Models ────────────────────────────────────────────────────────────────────

class User(Base):
    """
    A member of the movie group.

    No password or email: people identify by name only. `id` is the
    normalized (lower-cased, trimmed) name so lookups are case-insensitive;
    `name` keeps the casing the person first typed.
    """
    __tablename__ = "users"

    id = Column(String(30), primary_key=True, comment="Normalized name")
    name = Column(String(30), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    # Relationships
    unseen_entries = relationship(
        "UnseenMovie",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UnseenMovie.position",
    )
    availability_slots = relationship(
        "AvailabilitySlot",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def unseen_movies(self) -> list[str]:
        """Ordered movie ids, highest priority first."""
        return [entry.movie_id for entry in self.unseen_entries]

    def __repr__(self) -> str:
        return f"<User id={self.id!r} name={self.name!r}>"


class Movie(Base):
    """
    A catalog movie, keyed by its TMDB id (stored as a string).

    genres / cast are plain JSON lists; cast holds the top five names.
    """
    __tablename__ = "movies"

    tmdb_id = Column(String(20), primary_key=True)
    imdb_id = Column(String(20), nullable=True, index=True)
    title = Column(String(500), nullable=False, index=True)
    year = Column(Integer, nullable=False, default=0)
    poster_path = Column(String(255), nullable=True)
    overview = Column(Text, nullable=False, default="")
    runtime = Column(Integer, nullable=True)
    genres = Column(JSONType, nullable=False, default=list)
    director = Column(String(255), nullable=True)
    cast = Column(JSONType, nullable=False, default=list)
    rating = Column(Float, nullable=True)
    fetched_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Movie tmdb_id={self.tmdb_id!r} title={self.title!r} year={self.year}>"


class UnseenMovie(Base):
    """
    One entry of a user's ordered unseen list.

    movie_id is not a foreign key: lists may reference movies
    that were removed from the catalog, and readers skip those ids.
    """
    __tablename__ = "unseen_movies"

    user_id = Column(
        String(30),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    movie_id = Column(String(20), primary_key=True)
    position = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "position", name="uq_unseen_user_position"),
        CheckConstraint("position >= 0", name="chk_unseen_position_non_negative"),
        Index("idx_unseen_movies_movie", "movie_id"),
    )

    user = relationship("User", back_populates="unseen_entries")

    def __repr__(self) -> str:
        return f"<UnseenMovie user={self.user_id!r} movie={self.movie_id!r} pos={self.position}>"


class AvailabilitySlot(Base):
    """A user marked themselves free for one time slot on one date."""
    __tablename__ = "availability_slots"

    user_id = Column(
        String(30),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    date = Column(Date, primary_key=True)
    slot = Column(
        SAEnum(TimeSlotEnum, name="time_slot", native_enum=False),
        primary_key=True,
    )
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    user = relationship("User", back_populates="availability_slots")


class ScheduledEvent(Base):
    """
    A planned watch session.

    time_slot is derived from start_hour and kept for older clients.
    attendees is an ordered JSON list of display names.
    """
    __tablename__ = "scheduled_events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    movie_id = Column(String(20), nullable=True)
    date = Column(Date, nullable=False, index=True)
    time_slot = Column(
        SAEnum(TimeSlotEnum, name="time_slot", native_enum=False),
        nullable=False,
    )
    start_hour = Column(Integer, nullable=False)
    created_by = Column(String(30), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    watched = Column(Boolean, default=False, nullable=False)
    attendees = Column(JSONType, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("start_hour BETWEEN 13 AND 21", name="chk_event_start_hour"),
    )

    def __repr__(self) -> str:
        return f"<ScheduledEvent id={self.id} date={self.date} hour={self.start_hour}>"
