"""
Availability and event request/response schemas.
"""
from datetime import date as Date
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from movienight.services.scheduling_service import format_hour


class TimeSlot(str, Enum):
    """Coarse time-of-day slots people mark themselves free for."""

    afternoon = "afternoon"
    evening = "evening"


class AvailabilityResponse(BaseModel):
    """One user's free slots keyed by ISO date."""

    name: str
    slots: dict[str, list[TimeSlot]]
    updated_at: datetime


class UpdateAvailabilityRequest(BaseModel):
    """Replace the slots for one date; an empty list clears it."""

    slots: list[TimeSlot] = Field(default_factory=list, max_length=2)


class SlotOverlapResponse(BaseModel):
    slot: TimeSlot
    users: list[str]


class CreateEventRequest(BaseModel):
    """Payload for POST /events."""

    date: Date
    start_hour: int = Field(..., ge=13, le=21)
    movie_id: str | None = Field(default=None, max_length=20)


class UpdateEventRequest(BaseModel):
    """Partial update: only fields present in the body are applied."""

    movie_id: str | None = Field(default=None, max_length=20)
    watched: bool | None = None


class EventResponse(BaseModel):
    """A scheduled watch session."""

    id: UUID
    movie_id: str | None = None
    date: Date
    time_slot: TimeSlot
    start_hour: int
    created_by: str
    created_at: datetime
    watched: bool
    attendees: list[str]

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def start_label(self) -> str:
        return format_hour(self.start_hour)
