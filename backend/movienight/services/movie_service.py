"""
Movie catalog business logic: listing, manual upserts and TMDB imports.
"""
from datetime import datetime, timezone
from typing import Any, Literal

from sqlalchemy.orm import Session

from movienight.core.logging_config import get_logger
from movienight.db.models import Movie
from movienight.services.priority import count_unseen_by
from movienight.services.tmdb_sync import TMDBService
from movienight.services.user_service import list_users, normalize_username

logger = get_logger(__name__)

TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p"

PosterSize = Literal["w200", "w500", "original"]


class MovieNotFoundError(Exception):
    """Raised when a movie is not in the catalog (or not on TMDB)."""


def poster_url(poster_path: str | None, size: PosterSize = "w500") -> str | None:
    """Prefix the TMDB image base URL onto a poster path."""
    if not poster_path:
        return None
    return f"{TMDB_IMAGE_BASE}/{size}{poster_path}"


def list_movies(db: Session) -> list[Movie]:
    return db.query(Movie).order_by(Movie.title.asc()).all()


def get_movie(db: Session, tmdb_id: str) -> Movie:
    movie = db.get(Movie, tmdb_id)
    if movie is None:
        raise MovieNotFoundError(f"Movie {tmdb_id} not found")
    return movie


def save_movie(db: Session, data: dict[str, Any]) -> Movie:
    """Insert or overwrite a movie keyed by tmdb_id."""
    values = dict(data)
    values["tmdb_id"] = str(values["tmdb_id"])
    values.setdefault("fetched_at", datetime.now(timezone.utc))

    movie = db.get(Movie, values["tmdb_id"])
    created = movie is None
    if created:
        movie = Movie(**values)
        db.add(movie)
    else:
        for key, value in values.items():
            setattr(movie, key, value)

    db.commit()
    db.refresh(movie)
    logger.info("movie_saved", tmdb_id=movie.tmdb_id, created=created)
    return movie


async def add_movie_from_tmdb(
    db: Session,
    tmdb_id: int,
    tmdb: TMDBService | None = None,
) -> Movie:
    """Fetch a movie's details from TMDB and upsert it into the catalog."""
    service = tmdb or TMDBService()
    details = await service.get_movie_details(tmdb_id)
    if details is None:
        raise MovieNotFoundError(f"TMDB has no movie {tmdb_id}")
    return save_movie(db, details)


async def add_movie_by_imdb_id(
    db: Session,
    imdb_id: str,
    tmdb: TMDBService | None = None,
) -> Movie:
    """Resolve an IMDb id through TMDB /find, then import that movie."""
    service = tmdb or TMDBService()
    tmdb_id = await service.find_by_imdb_id(imdb_id)
    if tmdb_id is None:
        raise MovieNotFoundError(f"No TMDB movie for IMDb id {imdb_id}")
    return await add_movie_from_tmdb(db, tmdb_id, tmdb=service)


async def import_top_rated(
    db: Session,
    pages: int = 1,
    tmdb: TMDBService | None = None,
) -> list[Movie]:
    """Import the TMDB top rated list (20 per page) with full details."""
    service = tmdb or TMDBService()
    listing = await service.get_top_rated_movies(pages)

    imported: list[Movie] = []
    for raw in listing:
        tmdb_id = raw.get("id")
        if not tmdb_id:
            continue
        details = await service.get_movie_details(int(tmdb_id))
        if details is None:
            logger.warning("top_rated_missing_details", tmdb_id=tmdb_id)
            continue
        imported.append(save_movie(db, details))

    logger.info("top_rated_imported", pages=pages, count=len(imported))
    return imported


def delete_movie(db: Session, tmdb_id: str) -> None:
    """
    Remove a movie from the catalog.

    Users' unseen lists are left alone; the ranking skips ids that no
    longer resolve.
    """
    movie = get_movie(db, tmdb_id)
    db.delete(movie)
    db.commit()
    logger.info("movie_deleted", tmdb_id=tmdb_id)


def clear_all_movies(db: Session) -> int:
    count = db.query(Movie).delete(synchronize_session=False)
    db.commit()
    logger.warning("movies_cleared", count=count)
    return count


def list_movies_with_unseen_counts(
    db: Session,
    viewer_name: str | None = None,
) -> list[dict]:
    """Every catalog movie plus how many people still haven't seen it."""
    users = list_users(db)
    viewer = None
    if viewer_name:
        viewer_id = normalize_username(viewer_name)
        viewer = next((u for u in users if u.id == viewer_id), None)
    viewer_unseen = set(viewer.unseen_movies) if viewer else set()

    return [
        {
            "movie": movie,
            "unseen_count": count_unseen_by(movie.tmdb_id, users),
            "is_unseen_by_viewer": movie.tmdb_id in viewer_unseen,
        }
        for movie in list_movies(db)
    ]
