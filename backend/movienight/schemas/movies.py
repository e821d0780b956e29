"""
Movie request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from movienight.services.movie_service import poster_url as build_poster_url


class MovieResponse(BaseModel):
    """A catalog movie."""

    tmdb_id: str
    imdb_id: str | None = None
    title: str
    year: int
    poster_path: str | None = None
    overview: str = ""
    runtime: int | None = None
    genres: list[str] = Field(default_factory=list)
    director: str | None = None
    cast: list[str] = Field(default_factory=list)
    rating: float | None = None
    fetched_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def poster_url(self) -> str | None:
        return build_poster_url(self.poster_path)


class MovieWithUnseenCountResponse(BaseModel):
    """Catalog row decorated with the "N people haven't seen this" badge."""

    movie: MovieResponse
    unseen_count: int
    is_unseen_by_viewer: bool = False


class SaveMovieRequest(BaseModel):
    """Payload for POST /movies (manual entry or correction)."""

    tmdb_id: str = Field(..., min_length=1, max_length=20)
    imdb_id: str | None = Field(default=None, max_length=20)
    title: str
    year: int = Field(default=0, ge=0, le=2200)
    poster_path: str | None = None
    overview: str = ""
    runtime: int | None = Field(default=None, ge=0)
    genres: list[str] = Field(default_factory=list)
    director: str | None = None
    cast: list[str] = Field(default_factory=list, max_length=5)
    rating: float | None = Field(default=None, ge=0, le=10)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        title = " ".join(value.strip().split())
        if not title:
            raise ValueError("title cannot be empty")
        if len(title) > 500:
            raise ValueError("title cannot exceed 500 characters")
        return title


class ClearedResponse(BaseModel):
    """Bulk delete result."""

    deleted: int
