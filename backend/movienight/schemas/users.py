"""
User request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IdentifyRequest(BaseModel):
    """Payload for POST /users/identify."""

    name: str = Field(..., min_length=1, max_length=100)


class UserResponse(BaseModel):
    """A group member and their ordered unseen list."""

    name: str
    unseen_movies: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UsernameAvailabilityResponse(BaseModel):
    name: str
    available: bool


class UnseenListResponse(BaseModel):
    """The caller's unseen list, highest priority first."""

    name: str
    unseen_movies: list[str]


class ReorderUnseenRequest(BaseModel):
    """Full replacement of the unseen ordering."""

    unseen_movies: list[str]

    @field_validator("unseen_movies")
    @classmethod
    def no_blank_ids(cls, value: list[str]) -> list[str]:
        if any(not movie_id.strip() for movie_id in value):
            raise ValueError("movie ids cannot be blank")
        return value


class UserSummaryResponse(BaseModel):
    """Admin listing row."""

    name: str
    movies_count: int
