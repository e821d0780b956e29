"""
Group API — /group
──────────────────
Endpoints:
  GET /group/intersection   — Movies nobody has seen, ranked by aggregate score
  GET /group/summary        — Best upcoming slot + top pick + runner-ups
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from movienight.db.session import get_db
from movienight.schemas.group import (
    AggregateMovieScoreResponse,
    MovieNightSummaryResponse,
)
from movienight.services.group_service import (
    get_movie_night_summary,
    get_ranked_intersection,
)
from movienight.services.priority import AggregateMovieScore

router = APIRouter()


def _score_payload(score: AggregateMovieScore) -> dict:
    # Plain dict: FastAPI would deep-copy the ORM movie through dataclasses.asdict
    return {"movie_id": score.movie_id, "score": score.score, "movie": score.movie}


@router.get("/intersection", response_model=list[AggregateMovieScoreResponse])
def ranked_intersection(db: Session = Depends(get_db)) -> list[dict]:
    return [_score_payload(score) for score in get_ranked_intersection(db)]


@router.get("/summary", response_model=MovieNightSummaryResponse)
def movie_night_summary(db: Session = Depends(get_db)) -> dict:
    summary = get_movie_night_summary(db)
    top_pick = summary["top_pick"]
    return {
        **summary,
        "top_pick": _score_payload(top_pick) if top_pick else None,
        "runner_ups": [_score_payload(score) for score in summary["runner_ups"]],
    }
