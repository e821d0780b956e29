"""
Priority Engine
───────────────
Pure scoring and intersection queries over a snapshot of users and movies.

Callers pass the current users (anything exposing an ordered
`unseen_movies` sequence) and, for the ranked view, the movie catalog
(anything exposing `tmdb_id`). Nothing is cached between calls and nothing
here touches the database, so the functions are safe to call from any
request thread.

Scoring:
  A user whose unseen list has length n and holds the movie at index i
  contributes n - i. First place in a list of n is worth n, last place is
  worth 1, and users without the movie contribute 0.
"""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AggregateMovieScore:
    """A movie every user still wants to see, with its summed priority."""

    movie_id: str
    score: int
    movie: Any


def compute_aggregate_score(movie_id: str, users: Iterable[Any]) -> int:
    """Return the position-weighted desire score for *movie_id*."""
    score = 0
    for user in users:
        unseen = user.unseen_movies
        try:
            index = unseen.index(movie_id)
        except ValueError:
            continue
        score += len(unseen) - index
    return score


def get_unseen_intersection(users: Sequence[Any]) -> list[str]:
    """
    Return the movie ids present in every user's unseen list.

    Zero users gives an empty list and a single user gives that user's whole
    list. Results follow the first user's order, without duplicates.
    """
    if not users:
        return []

    remaining = list(dict.fromkeys(users[0].unseen_movies))
    for user in users[1:]:
        if not remaining:
            break
        unseen = set(user.unseen_movies)
        remaining = [movie_id for movie_id in remaining if movie_id in unseen]
    return remaining


def get_intersection_with_scores(
    users: Sequence[Any],
    movies: Iterable[Any],
) -> list[AggregateMovieScore]:
    """
    Rank the shared unseen movies by aggregate score, highest first.

    Ids that do not resolve to a movie in *movies* are skipped. Equal scores
    keep intersection order.
    """
    movie_map = {movie.tmdb_id: movie for movie in movies}

    scored = [
        AggregateMovieScore(
            movie_id=movie_id,
            score=compute_aggregate_score(movie_id, users),
            movie=movie_map[movie_id],
        )
        for movie_id in get_unseen_intersection(users)
        if movie_id in movie_map
    ]
    scored.sort(key=lambda item: item.score, reverse=True)
    return scored


def count_unseen_by(movie_id: str, users: Iterable[Any]) -> int:
    """Count users who have *movie_id* anywhere in their unseen list."""
    return sum(1 for user in users if movie_id in user.unseen_movies)
