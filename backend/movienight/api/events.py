"""
Events API — /events
────────────────────
Scheduled watch sessions with RSVPs.

Endpoints:
  GET    /events                 — All events, soonest first
  POST   /events                 — Schedule (caller auto-attends)
  PATCH  /events/{id}            — Change movie / mark watched
  DELETE /events/{id}            — Cancel
  POST   /events/{id}/rsvp       — Toggle caller's attendance
"""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from movienight.api.errors import http_error
from movienight.db.models import ScheduledEvent, User
from movienight.db.session import get_db
from movienight.deps.identity import get_current_user
from movienight.schemas.scheduling import (
    CreateEventRequest,
    EventResponse,
    UpdateEventRequest,
)
from movienight.services.scheduling_service import (
    EventNotFoundError,
    InvalidEventError,
    create_event,
    delete_event,
    list_events,
    toggle_rsvp,
    update_event,
)

router = APIRouter()


@router.get("", response_model=list[EventResponse])
def list_all_events(db: Session = Depends(get_db)) -> list[ScheduledEvent]:
    return list_events(db)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def schedule_event(
    payload: CreateEventRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ScheduledEvent:
    try:
        return create_event(
            db,
            created_by=current_user.name,
            day=payload.date,
            start_hour=payload.start_hour,
            movie_id=payload.movie_id,
        )
    except InvalidEventError as exc:
        raise http_error(status.HTTP_400_BAD_REQUEST, "INVALID_EVENT", exc) from exc


@router.patch("/{event_id}", response_model=EventResponse)
def patch_event(
    event_id: UUID,
    payload: UpdateEventRequest,
    db: Session = Depends(get_db),
) -> ScheduledEvent:
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("watched", False) is None:
        raise http_error(status.HTTP_400_BAD_REQUEST, "INVALID_EVENT", "watched cannot be null")
    try:
        return update_event(db, event_id, changes)
    except EventNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "EVENT_NOT_FOUND", exc) from exc
    except InvalidEventError as exc:
        raise http_error(status.HTTP_400_BAD_REQUEST, "INVALID_EVENT", exc) from exc


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_event(event_id: UUID, db: Session = Depends(get_db)) -> None:
    try:
        delete_event(db, event_id)
    except EventNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "EVENT_NOT_FOUND", exc) from exc


@router.post("/{event_id}/rsvp", response_model=EventResponse)
def rsvp(
    event_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ScheduledEvent:
    try:
        return toggle_rsvp(db, event_id, current_user.name)
    except EventNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "EVENT_NOT_FOUND", exc) from exc
