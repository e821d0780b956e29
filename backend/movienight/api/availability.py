"""
Availability API — /availability
────────────────────────────────
Endpoints:
  GET  /availability                           — Everyone's free slots
  GET  /availability/me                        — Caller's free slots
  PUT  /availability/me/{date}                 — Replace caller's slots for a date
  POST /availability/me/{date}/{slot}/toggle   — Flip one slot
  GET  /availability/overlap/{date}            — Who is free per slot on a date
"""
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from movienight.api.errors import http_error
from movienight.db.models import TimeSlotEnum, User
from movienight.db.session import get_db
from movienight.deps.identity import get_current_user
from movienight.schemas.scheduling import (
    AvailabilityResponse,
    SlotOverlapResponse,
    TimeSlot,
    UpdateAvailabilityRequest,
)
from movienight.services.scheduling_service import (
    get_availability,
    get_overlap_for_date,
    list_availability,
    toggle_availability,
    update_availability,
)
from movienight.services.user_service import UserNotFoundError

router = APIRouter()


@router.get("", response_model=list[AvailabilityResponse])
def list_all_availability(db: Session = Depends(get_db)) -> list[dict]:
    return list_availability(db)


@router.get("/me", response_model=AvailabilityResponse)
def get_my_availability(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    try:
        return get_availability(db, current_user.name)
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc


@router.put("/me/{day}", response_model=AvailabilityResponse)
def set_my_availability(
    day: date,
    payload: UpdateAvailabilityRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    slots = [TimeSlotEnum(slot.value) for slot in payload.slots]
    try:
        return update_availability(db, current_user.name, day, slots)
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc


@router.post("/me/{day}/{slot}/toggle", response_model=AvailabilityResponse)
def toggle_my_slot(
    day: date,
    slot: TimeSlot,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    try:
        return toggle_availability(db, current_user.name, day, TimeSlotEnum(slot.value))
    except UserNotFoundError as exc:
        raise http_error(status.HTTP_404_NOT_FOUND, "USER_NOT_FOUND", exc) from exc


@router.get("/overlap/{day}", response_model=list[SlotOverlapResponse])
def overlap_for_date(day: date, db: Session = Depends(get_db)) -> list[dict]:
    return get_overlap_for_date(list_availability(db), day.isoformat())
