"""
Scheduling business logic: per-user availability and watch events.
"""
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from movienight.core.logging_config import get_logger
from movienight.db.models import AvailabilitySlot, ScheduledEvent, TimeSlotEnum, User
from movienight.services.user_service import get_user, normalize_username

logger = get_logger(__name__)

TIME_SLOTS: tuple[TimeSlotEnum, ...] = (TimeSlotEnum.afternoon, TimeSlotEnum.evening)

TIME_SLOT_LABELS: dict[TimeSlotEnum, str] = {
    TimeSlotEnum.afternoon: "Afternoon (12pm-5pm)",
    TimeSlotEnum.evening: "Evening (6pm-11pm)",
}

# Start hours available for scheduling (1pm-9pm)
START_HOURS: tuple[int, ...] = tuple(range(13, 22))

EVENING_START_HOUR = 18
_UPDATABLE_EVENT_FIELDS = {"movie_id", "watched"}


class EventNotFoundError(Exception):
    pass


class InvalidEventError(Exception):
    pass


def format_hour(hour: int) -> str:
    """24h hour → '1pm' style label."""
    if hour == 12:
        return "12pm"
    if hour == 24 or hour == 0:
        return "12am"
    if hour < 12:
        return f"{hour}am"
    return f"{hour - 12}pm"


def get_time_slot_from_hour(hour: int) -> TimeSlotEnum:
    return TimeSlotEnum.afternoon if hour < EVENING_START_HOUR else TimeSlotEnum.evening


# ── Availability ──────────────────────────────────────────────────────────────

def _availability_payload(user: User) -> dict:
    """Shape a user's slot rows as {name, slots: {iso_date: [slot, ...]}}."""
    slots: dict[str, list[TimeSlotEnum]] = {}
    for row in sorted(user.availability_slots, key=lambda r: (r.date, TIME_SLOTS.index(r.slot))):
        slots.setdefault(row.date.isoformat(), []).append(row.slot)
    return {"name": user.name, "slots": slots, "updated_at": user.updated_at}


def get_availability(db: Session, name: str) -> dict:
    user = get_user(db, name)
    return _availability_payload(user)


def list_availability(db: Session) -> list[dict]:
    """Availability for every user who has marked at least one slot."""
    users = (
        db.query(User)
        .options(selectinload(User.availability_slots))
        .order_by(User.created_at.asc(), User.id.asc())
        .all()
    )
    return [_availability_payload(user) for user in users if user.availability_slots]


def update_availability(
    db: Session,
    name: str,
    day: date,
    slots: Iterable[TimeSlotEnum],
) -> dict:
    """Replace the user's slots for *day*. An empty list clears the day."""
    user = get_user(db, name)
    wanted = {TimeSlotEnum(slot) for slot in slots}

    user.availability_slots = [row for row in user.availability_slots if row.date != day]
    db.flush()
    now = datetime.now(timezone.utc)
    for slot in TIME_SLOTS:
        if slot in wanted:
            user.availability_slots.append(AvailabilitySlot(date=day, slot=slot, updated_at=now))
    user.updated_at = now

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(
        "availability_updated",
        user=user.id,
        date=day.isoformat(),
        slots=[s.value for s in TIME_SLOTS if s in wanted],
    )
    return _availability_payload(user)


def toggle_availability(db: Session, name: str, day: date, slot: TimeSlotEnum) -> dict:
    """Flip one slot on *day* for *name*."""
    user = get_user(db, name)
    slot = TimeSlotEnum(slot)
    current = {row.slot for row in user.availability_slots if row.date == day}
    if slot in current:
        current.discard(slot)
    else:
        current.add(slot)
    return update_availability(db, name, day, current)


def get_overlap_for_date(availability: Iterable[dict], day: str) -> list[dict]:
    """Who is free in each slot on *day* (ISO string), in slot order."""
    availability = list(availability)
    return [
        {
            "slot": slot,
            "users": [a["name"] for a in availability if slot in a["slots"].get(day, [])],
        }
        for slot in TIME_SLOTS
    ]


# ── Events ────────────────────────────────────────────────────────────────────

def _get_event_or_raise(db: Session, event_id: UUID) -> ScheduledEvent:
    event = db.get(ScheduledEvent, event_id)
    if event is None:
        raise EventNotFoundError(f"Event {event_id} not found")
    return event


def create_event(
    db: Session,
    created_by: str,
    day: date,
    start_hour: int,
    movie_id: str | None = None,
) -> ScheduledEvent:
    """Schedule a watch session. The creator is automatically attending."""
    if start_hour not in START_HOURS:
        raise InvalidEventError(
            f"start_hour must be between {START_HOURS[0]} and {START_HOURS[-1]}"
        )

    event = ScheduledEvent(
        movie_id=movie_id or None,
        date=day,
        start_hour=start_hour,
        time_slot=get_time_slot_from_hour(start_hour),
        created_by=created_by,
        watched=False,
        attendees=[created_by],
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info(
        "event_created",
        event_id=str(event.id),
        date=day.isoformat(),
        start_hour=start_hour,
        movie_id=event.movie_id,
    )
    return event


def update_event(db: Session, event_id: UUID, changes: dict[str, Any]) -> ScheduledEvent:
    """Apply a partial update; only movie_id and watched can change."""
    unknown = set(changes) - _UPDATABLE_EVENT_FIELDS
    if unknown:
        raise InvalidEventError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    event = _get_event_or_raise(db, event_id)
    for key, value in changes.items():
        setattr(event, key, value)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("event_updated", event_id=str(event_id), fields=sorted(changes))
    return event


def toggle_rsvp(db: Session, event_id: UUID, name: str) -> ScheduledEvent:
    """Add or remove *name* from the attendees (case-insensitive match)."""
    event = _get_event_or_raise(db, event_id)
    normalized = normalize_username(name)

    attendees = list(event.attendees or [])
    existing = next(
        (i for i, attendee in enumerate(attendees) if normalize_username(attendee) == normalized),
        None,
    )
    if existing is not None:
        attendees.pop(existing)
        attending = False
    else:
        attendees.append(name)
        attending = True

    # Assign a new list so the JSON column is flagged dirty
    event.attendees = attendees
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("rsvp_toggled", event_id=str(event_id), user=normalized, attending=attending)
    return event


def delete_event(db: Session, event_id: UUID) -> None:
    event = _get_event_or_raise(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("event_deleted", event_id=str(event_id))


def list_events(db: Session) -> list[ScheduledEvent]:
    return (
        db.query(ScheduledEvent)
        .order_by(ScheduledEvent.date.asc(), ScheduledEvent.start_hour.asc())
        .all()
    )


def clear_all_events(db: Session) -> int:
    count = db.query(ScheduledEvent).delete(synchronize_session=False)
    db.commit()
    logger.warning("events_cleared", count=count)
    return count
