"""
Identity dependency — shared across endpoints that act "as" someone.

People are identified by name only, sent in the X-User-Name header.
There is no password: the header is trusted as-is.

Usage in any route:
    from movienight.deps.identity import get_current_user
    from movienight.db.models import User

    @router.get("/mine")
    def mine(user: User = Depends(get_current_user)):
        ...
"""
from fastapi import Depends, Header, status
from sqlalchemy.orm import Session

from movienight.api.errors import http_error
from movienight.db.models import User
from movienight.db.session import get_db
from movienight.services.user_service import UserNotFoundError, get_user

USER_HEADER = "X-User-Name"


def get_current_user(
    x_user_name: str | None = Header(default=None, alias=USER_HEADER),
    db: Session = Depends(get_db),
) -> User:
    """
    Return the stored user named by the X-User-Name header.

    401 when the header is missing or blank, 404 when nobody has that name.
    """
    if not x_user_name or not x_user_name.strip():
        raise http_error(
            status.HTTP_401_UNAUTHORIZED,
            "IDENTITY_REQUIRED",
            f"{USER_HEADER} header is required",
        )

    try:
        return get_user(db, x_user_name)
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc


def get_optional_user_name(
    x_user_name: str | None = Header(default=None, alias=USER_HEADER),
) -> str | None:
    """The raw header value, or None when the caller did not identify."""
    if x_user_name and x_user_name.strip():
        return x_user_name.strip()
    return None
