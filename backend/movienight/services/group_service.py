"""
Group view: what everyone wants to watch and when they can watch it.

Loads a fresh snapshot of users and movies per call and hands it to the
priority engine; the best slot is picked from the availability store.
"""
from collections.abc import Iterable
from datetime import date, timedelta

from sqlalchemy.orm import Session

from movienight.core.config import settings
from movienight.services.movie_service import list_movies
from movienight.services.priority import (
    AggregateMovieScore,
    get_intersection_with_scores,
)
from movienight.services.scheduling_service import TIME_SLOTS, list_availability
from movienight.services.user_service import list_users

RUNNER_UP_COUNT = 3


def get_ranked_intersection(db: Session) -> list[AggregateMovieScore]:
    """Movies nobody in the group has seen, highest aggregate priority first."""
    return get_intersection_with_scores(list_users(db), list_movies(db))


def find_best_slot(
    availability: Iterable[dict],
    today: date,
    weeks_ahead: int = 5,
) -> dict | None:
    """
    Pick the upcoming (date, slot) with the most people available.

    Scans weeks_ahead * 7 days starting at *today*, afternoon before evening.
    The earliest slot wins ties. Returns None when nobody marked anything.
    """
    availability = list(availability)
    best: dict | None = None
    max_users = 0

    for offset in range(weeks_ahead * 7):
        day = (today + timedelta(days=offset)).isoformat()
        for slot in TIME_SLOTS:
            users = [a["name"] for a in availability if slot in a["slots"].get(day, [])]
            if len(users) > max_users:
                max_users = len(users)
                best = {"date": day, "slot": slot, "users": users}

    return best


def get_movie_night_summary(db: Session, today: date | None = None) -> dict:
    """Best upcoming slot plus the top pick and runner-ups from the ranking."""
    ranked = get_ranked_intersection(db)
    best_slot = find_best_slot(
        list_availability(db),
        today or date.today(),
        settings.BEST_SLOT_WEEKS_AHEAD,
    )
    return {
        "best_slot": best_slot,
        "top_pick": ranked[0] if ranked else None,
        "runner_ups": ranked[1 : 1 + RUNNER_UP_COUNT],
        "intersection_size": len(ranked),
    }
