"""
TMDB Sync Service
─────────────────
Wraps the TMDB v3 REST API for catalog imports.

Flow:
  1. An admin adds a movie by TMDB id (or IMDb id, resolved via /find).
  2. This service fetches details + credits and maps them to the Movie shape.
  3. movie_service upserts the row.

Bulk seeding pulls /movie/top_rated page by page.
"""
import asyncio
from datetime import datetime, timezone

import httpx

from movienight.core.config import settings

TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_TIMEOUT_SECONDS = 10.0
TOP_RATED_PAGE_DELAY_SECONDS = 0.1
CAST_LIMIT = 5


class TMDBConfigError(Exception):
    """Raised when TMDB client is used without an API key."""


class TMDBUpstreamError(Exception):
    """Raised for non-recoverable TMDB request/response errors."""


class TMDBService:
    """
    Thin async wrapper around TMDB v3 API.
    Uses httpx so requests do not block the event loop.
    """

    def __init__(self, api_key: str | None = None) -> None:
        self.api_key = api_key or settings.TMDB_API_KEY
        if not self.api_key:
            raise TMDBConfigError(
                "TMDB_API_KEY is not set. "
                "Add it to your .env file or pass it explicitly."
            )

    async def _get(self, path: str, params: dict, action: str) -> httpx.Response:
        query = {"api_key": self.api_key, **params}
        try:
            async with httpx.AsyncClient(timeout=TMDB_TIMEOUT_SECONDS) as client:
                response = await client.get(f"{TMDB_BASE_URL}{path}", params=query)
                if response.status_code == 404:
                    return response
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TMDBUpstreamError(
                f"TMDB {action} failed with status {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise TMDBUpstreamError(f"TMDB {action} request failed") from exc
        return response

    async def get_movie_details(self, tmdb_id: int) -> dict | None:
        """
        Fetch full details for a single movie including credits.

        Returns the mapped movie dict, or None if TMDB has no such movie.
        """
        response = await self._get(
            f"/movie/{tmdb_id}",
            {"append_to_response": "credits"},
            "details",
        )
        if response.status_code == 404:
            return None
        return map_movie_details(response.json())

    async def find_by_imdb_id(self, imdb_id: str) -> int | None:
        """Resolve an IMDb id (tt...) to a TMDB movie id."""
        response = await self._get(
            f"/find/{imdb_id}",
            {"external_source": "imdb_id"},
            "find",
        )
        if response.status_code == 404:
            return None
        results = response.json().get("movie_results") or []
        if not results:
            return None
        return int(results[0]["id"])

    async def get_top_rated_movies(self, pages: int = 5) -> list[dict]:
        """
        Fetch the raw top rated listing, 20 movies per page.

        Pages are fetched sequentially with a short pause to stay under the
        TMDB rate limit.
        """
        movies: list[dict] = []
        for page in range(1, pages + 1):
            response = await self._get(
                "/movie/top_rated",
                {"page": page, "language": "en-US"},
                "top rated",
            )
            if response.status_code == 404:
                break
            movies.extend(response.json().get("results", []))
            if page < pages:
                await asyncio.sleep(TOP_RATED_PAGE_DELAY_SECONDS)
        return movies


def _release_year(release_date: str | None) -> int:
    if isinstance(release_date, str) and len(release_date) >= 4 and release_date[:4].isdigit():
        return int(release_date[:4])
    return 0


def map_movie_details(raw: dict) -> dict:
    """Normalize a TMDB /movie/{id} details payload into Movie columns."""
    credits = raw.get("credits") or {}
    crew = credits.get("crew", [])
    director = next((p.get("name") for p in crew if p.get("job") == "Director"), None)

    cast = credits.get("cast", [])
    cast_names = [p.get("name") for p in cast[:CAST_LIMIT] if p.get("name")]

    return {
        "tmdb_id": str(raw["id"]),
        "imdb_id": raw.get("imdb_id"),
        "title": raw.get("title") or "",
        "year": _release_year(raw.get("release_date")),
        "poster_path": raw.get("poster_path"),
        "overview": raw.get("overview") or "",
        "runtime": raw.get("runtime"),
        "genres": [g.get("name") for g in raw.get("genres", []) if g.get("name")],
        "director": director,
        "cast": cast_names,
        # TMDB reports 0 for unrated titles
        "rating": raw.get("vote_average") or None,
        "fetched_at": datetime.now(timezone.utc),
    }
