"""
Admin API — /admin
──────────────────
Housekeeping for the group. Unauthenticated like the rest of the app.

Endpoints:
  GET    /admin/users                         — Names + list sizes
  DELETE /admin/users/{name}                  — Remove a user and their data
  DELETE /admin/movies/{tmdb_id}              — Remove one catalog movie
  DELETE /admin/movies                        — Clear the catalog
  DELETE /admin/events                        — Clear all events
  POST   /admin/movies/import-top-rated       — Seed from TMDB top rated
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from movienight.api.errors import http_error
from movienight.db.models import Movie
from movienight.db.session import get_db
from movienight.schemas.movies import ClearedResponse, MovieResponse
from movienight.schemas.users import UserSummaryResponse
from movienight.services.movie_service import (
    MovieNotFoundError,
    clear_all_movies,
    delete_movie,
    import_top_rated,
)
from movienight.services.scheduling_service import clear_all_events
from movienight.services.tmdb_sync import TMDBConfigError, TMDBUpstreamError
from movienight.services.user_service import (
    UserNotFoundError,
    delete_user,
    list_user_summaries,
)

router = APIRouter()


@router.get("/users", response_model=list[UserSummaryResponse])
def user_summaries(db: Session = Depends(get_db)) -> list[dict]:
    return list_user_summaries(db)


@router.delete("/users/{name}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(name: str, db: Session = Depends(get_db)) -> None:
    try:
        delete_user(db, name)
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc


@router.delete("/movies/{tmdb_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_movie(tmdb_id: str, db: Session = Depends(get_db)) -> None:
    try:
        delete_movie(db, tmdb_id)
    except MovieNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "MOVIE_NOT_FOUND", exc) from exc


@router.delete("/movies", response_model=ClearedResponse)
def clear_movies(db: Session = Depends(get_db)) -> dict:
    return {"deleted": clear_all_movies(db)}


@router.delete("/events", response_model=ClearedResponse)
def clear_events(db: Session = Depends(get_db)) -> dict:
    return {"deleted": clear_all_events(db)}


@router.post("/movies/import-top-rated", response_model=list[MovieResponse])
async def seed_top_rated(
    pages: int = Query(1, ge=1, le=13, description="20 movies per page"),
    db: Session = Depends(get_db),
) -> list[Movie]:
    try:
        return await import_top_rated(db, pages)
    except TMDBConfigError as exc:
        raise http_error(status.HTTP_503_SERVICE_UNAVAILABLE, "TMDB_NOT_CONFIGURED", exc) from exc
    except TMDBUpstreamError as exc:
        raise http_error(status.HTTP_502_BAD_GATEWAY, "TMDB_UPSTREAM_ERROR", exc) from exc
