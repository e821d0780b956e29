"""
User business logic: name-based identity and ordered unseen lists.
"""
import re
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from movienight.core.logging_config import get_logger
from movienight.db.models import UnseenMovie, User

logger = get_logger(__name__)

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 30
_USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9 ]+$")


class UserNotFoundError(Exception):
    pass


class InvalidUsernameError(Exception):
    pass


class InvalidReorderError(Exception):
    pass


def normalize_username(name: str) -> str:
    """Lower-case and trim a name for storage and comparison."""
    return name.lower().strip()


def validate_username(name: str) -> str:
    """
    Return the trimmed display name, or raise InvalidUsernameError.

    Rules: 2-30 characters, letters, digits and spaces only.
    """
    trimmed = name.strip()
    if len(trimmed) < USERNAME_MIN_LENGTH:
        raise InvalidUsernameError("Name must be at least 2 characters")
    if len(trimmed) > USERNAME_MAX_LENGTH:
        raise InvalidUsernameError("Name must be 30 characters or less")
    if not _USERNAME_PATTERN.match(trimmed):
        raise InvalidUsernameError("Name can only contain letters, numbers, and spaces")
    return trimmed


def _find_user(db: Session, name: str) -> User | None:
    return (
        db.query(User)
        .options(selectinload(User.unseen_entries))
        .filter(User.id == normalize_username(name))
        .first()
    )


def get_user(db: Session, name: str) -> User:
    user = _find_user(db, name)
    if user is None:
        raise UserNotFoundError(f"User {name!r} not found")
    return user


def is_username_available(db: Session, name: str) -> bool:
    """Case-insensitive check against existing users."""
    return db.get(User, normalize_username(name)) is None


def identify_user(db: Session, name: str) -> tuple[User, bool]:
    """
    Get-or-create a user by name.

    Returns (user, created). An existing user keeps the casing of the name
    they registered with.
    """
    display_name = validate_username(name)
    existing = _find_user(db, display_name)
    if existing is not None:
        return existing, False

    user = User(id=normalize_username(display_name), name=display_name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Someone else registered the same name first
        db.rollback()
        existing = _find_user(db, display_name)
        if existing is None:
            raise
        return existing, False
    db.refresh(user)
    logger.info("user_created", user=user.id)
    return user, True


def list_users(db: Session) -> list[User]:
    """All users with their unseen lists loaded, oldest first."""
    return (
        db.query(User)
        .options(selectinload(User.unseen_entries))
        .order_by(User.created_at.asc(), User.id.asc())
        .all()
    )


def _replace_unseen(db: Session, user: User, movie_ids: list[str]) -> None:
    """Rewrite the whole ordered list. Positions are dense from 0."""
    user.unseen_entries.clear()
    # Old rows must be gone before new positions are inserted
    db.flush()
    user.unseen_entries.extend(
        UnseenMovie(movie_id=movie_id, position=index)
        for index, movie_id in enumerate(movie_ids)
    )
    user.updated_at = datetime.now(timezone.utc)
    db.add(user)
    db.commit()
    db.refresh(user)


def toggle_unseen(db: Session, name: str, movie_id: str) -> list[str]:
    """
    Flip a movie's unseen status for *name*.

    Unseen movies are removed; anything else is appended at the bottom of
    the list. Returns the new ordered list.
    """
    user = get_user(db, name)
    current = user.unseen_movies
    if movie_id in current:
        updated = [m for m in current if m != movie_id]
        action = "removed"
    else:
        updated = current + [movie_id]
        action = "added"

    _replace_unseen(db, user, updated)
    logger.info("unseen_toggled", user=user.id, movie_id=movie_id, action=action)
    return user.unseen_movies


def reorder_unseen(db: Session, name: str, new_order: list[str]) -> list[str]:
    """
    Replace the user's ordering. *new_order* must be a permutation of the
    current list.
    """
    user = get_user(db, name)
    current = user.unseen_movies

    if len(set(new_order)) != len(new_order):
        raise InvalidReorderError("New order contains duplicate movie ids")
    if set(new_order) != set(current):
        raise InvalidReorderError("New order must contain exactly the current unseen movies")

    if new_order != current:
        _replace_unseen(db, user, new_order)
        logger.info("unseen_reordered", user=user.id, count=len(new_order))
    return user.unseen_movies


def delete_user(db: Session, name: str) -> None:
    """Remove a user together with their unseen list and availability."""
    user = get_user(db, name)
    db.delete(user)
    db.commit()
    logger.info("user_deleted", user=user.id)


def list_user_summaries(db: Session) -> list[dict]:
    """Name and list size for every user (admin view)."""
    return [
        {"name": user.name, "movies_count": len(user.unseen_entries)}
        for user in list_users(db)
    ]
