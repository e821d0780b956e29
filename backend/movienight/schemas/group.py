"""
Group view response schemas.
"""
from pydantic import BaseModel, ConfigDict

from movienight.schemas.movies import MovieResponse
from movienight.schemas.scheduling import TimeSlot


class AggregateMovieScoreResponse(BaseModel):
    """A movie in everyone's unseen list with its aggregate priority score."""

    movie_id: str
    score: int
    movie: MovieResponse

    model_config = ConfigDict(from_attributes=True)


class BestSlotResponse(BaseModel):
    """The upcoming slot where the most people are free."""

    date: str
    slot: TimeSlot
    users: list[str]


class MovieNightSummaryResponse(BaseModel):
    """Recommended (when, what) decision for the next movie night."""

    best_slot: BestSlotResponse | None = None
    top_pick: AggregateMovieScoreResponse | None = None
    runner_ups: list[AggregateMovieScoreResponse]
    intersection_size: int

    model_config = ConfigDict(from_attributes=True)
