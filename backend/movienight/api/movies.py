"""
Movies API — /movies
────────────────────
Endpoints:
  GET  /movies                      — Catalog with "N people haven't seen this"
  GET  /movies/{tmdb_id}            — Single movie
  POST /movies                      — Manual upsert
  POST /movies/tmdb/{tmdb_id}       — Import from TMDB by TMDB id
  POST /movies/imdb/{imdb_id}       — Import from TMDB by IMDb id
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from movienight.api.errors import http_error
from movienight.db.models import Movie
from movienight.db.session import get_db
from movienight.deps.identity import get_optional_user_name
from movienight.schemas.movies import (
    MovieResponse,
    MovieWithUnseenCountResponse,
    SaveMovieRequest,
)
from movienight.services.movie_service import (
    MovieNotFoundError,
    add_movie_by_imdb_id,
    add_movie_from_tmdb,
    get_movie,
    list_movies_with_unseen_counts,
    save_movie,
)
from movienight.services.tmdb_sync import TMDBConfigError, TMDBUpstreamError

router = APIRouter()


@router.get("", response_model=list[MovieWithUnseenCountResponse])
def list_catalog(
    viewer_name: str | None = Depends(get_optional_user_name),
    db: Session = Depends(get_db),
) -> list[dict]:
    return list_movies_with_unseen_counts(db, viewer_name)


@router.get("/{tmdb_id}", response_model=MovieResponse)
def get_catalog_movie(tmdb_id: str, db: Session = Depends(get_db)) -> Movie:
    try:
        return get_movie(db, tmdb_id)
    except MovieNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "MOVIE_NOT_FOUND", exc) from exc


@router.post("", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
def upsert_movie(payload: SaveMovieRequest, db: Session = Depends(get_db)) -> Movie:
    """Create or overwrite a catalog entry without calling TMDB."""
    return save_movie(db, payload.model_dump())


@router.post("/tmdb/{tmdb_id}", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
async def import_by_tmdb_id(tmdb_id: int, db: Session = Depends(get_db)) -> Movie:
    try:
        return await add_movie_from_tmdb(db, tmdb_id)
    except MovieNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "MOVIE_NOT_FOUND", exc) from exc
    except TMDBConfigError as exc:
        raise http_error(status.HTTP_503_SERVICE_UNAVAILABLE, "TMDB_NOT_CONFIGURED", exc) from exc
    except TMDBUpstreamError as exc:
        raise http_error(status.HTTP_502_BAD_GATEWAY, "TMDB_UPSTREAM_ERROR", exc) from exc


@router.post("/imdb/{imdb_id}", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
async def import_by_imdb_id(imdb_id: str, db: Session = Depends(get_db)) -> Movie:
    try:
        return await add_movie_by_imdb_id(db, imdb_id)
    except MovieNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "MOVIE_NOT_FOUND", exc) from exc
    except TMDBConfigError as exc:
        raise http_error(status.HTTP_503_SERVICE_UNAVAILABLE, "TMDB_NOT_CONFIGURED", exc) from exc
    except TMDBUpstreamError as exc:
        raise http_error(status.HTTP_502_BAD_GATEWAY, "TMDB_UPSTREAM_ERROR", exc) from exc
