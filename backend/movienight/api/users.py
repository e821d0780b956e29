"""
Users API — /users
──────────────────
Name-based identity and each person's ordered unseen list.

Endpoints:
  POST /users/identify                       — Get-or-create by name
  GET  /users/availability/{name}            — Is this name free?
  GET  /users                                — Everyone (with unseen lists)
  GET  /users/{name}                         — One person
  GET  /users/me/unseen                      — Caller's unseen list
  POST /users/me/unseen/{movie_id}/toggle    — Mark seen/unseen
  PUT  /users/me/unseen                      — Reorder (full replacement)

"me" routes identify the caller by the X-User-Name header.
"""
from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from movienight.api.errors import http_error
from movienight.db.models import User
from movienight.db.session import get_db
from movienight.deps.identity import get_current_user
from movienight.schemas.users import (
    IdentifyRequest,
    ReorderUnseenRequest,
    UnseenListResponse,
    UsernameAvailabilityResponse,
    UserResponse,
)
from movienight.services.user_service import (
    InvalidReorderError,
    InvalidUsernameError,
    UserNotFoundError,
    get_user,
    identify_user,
    is_username_available,
    list_users,
    reorder_unseen,
    toggle_unseen,
)

router = APIRouter()


@router.post("/identify", response_model=UserResponse)
def identify(
    payload: IdentifyRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> User:
    """Return the user with this name, creating them on first visit."""
    try:
        user, created = identify_user(db, payload.name)
    except InvalidUsernameError as exc:
        raise http_error(status.HTTP_400_BAD_REQUEST, "INVALID_USERNAME", exc) from exc

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return user


@router.get("/availability/{name}", response_model=UsernameAvailabilityResponse)
def check_availability(name: str, db: Session = Depends(get_db)) -> dict:
    return {"name": name, "available": is_username_available(db, name)}


@router.get("", response_model=list[UserResponse])
def list_all_users(db: Session = Depends(get_db)) -> list[User]:
    return list_users(db)


@router.get("/me/unseen", response_model=UnseenListResponse)
def get_my_unseen(current_user: User = Depends(get_current_user)) -> dict:
    return {"name": current_user.name, "unseen_movies": current_user.unseen_movies}


@router.post("/me/unseen/{movie_id}/toggle", response_model=UnseenListResponse)
def toggle_my_unseen(
    movie_id: str = Path(..., min_length=1, max_length=20),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    try:
        unseen = toggle_unseen(db, current_user.name, movie_id)
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc
    return {"name": current_user.name, "unseen_movies": unseen}


@router.put("/me/unseen", response_model=UnseenListResponse)
def reorder_my_unseen(
    payload: ReorderUnseenRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    try:
        unseen = reorder_unseen(db, current_user.name, payload.unseen_movies)
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc
    except InvalidReorderError as exc:
        raise http_error(status.HTTP_400_BAD_REQUEST, "INVALID_REORDER", exc) from exc
    return {"name": current_user.name, "unseen_movies": unseen}


@router.get("/{name}", response_model=UserResponse)
def get_one_user(name: str, db: Session = Depends(get_db)) -> User:
    try:
        return get_user(db, name)
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc
