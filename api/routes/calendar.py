"""Calendar event routes"""

from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.enums import MealType
from domain.models import get_db_session
from domain.schemas.calendar_schemas import (
    CalendarEventCreate,
    CalendarEventResponse,
    CalendarEventUpdate,
    MealModification,
)
from services.calendar_service import CalendarService, to_response
from app.exceptions import ServiceValidationError

router = APIRouter(prefix="/calendar", tags=["Calendar"])
logger = logging.getLogger("mealplanner.api.calendar")


@router.post("/events", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
def create_event(body: CalendarEventCreate, db: Session = Depends(get_db_session)):
    return to_response(CalendarService.create_event(db, body))


@router.get("/events", response_model=List[CalendarEventResponse])
def list_events(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return [to_response(e) for e in CalendarService.list_events(db, user_id)]


@router.get("/events/range", response_model=List[CalendarEventResponse])
def get_events_for_range(
    user_id: UUID = Query(...),
    start: date = Query(...),
    end: date = Query(...),
    db: Session = Depends(get_db_session),
):
    """Every occurrence inside [start, end], recurring events expanded"""
    if end < start:
        raise ServiceValidationError("end must not be before start", code="INVALID_RANGE")
    return CalendarService.get_events_for_range(db, user_id, start, end)


@router.get("/modifications", response_model=MealModification)
def get_meal_modifications(
    user_id: UUID = Query(...),
    day: date = Query(..., alias="date"),
    meal_type: Optional[MealType] = Query(None),
    db: Session = Depends(get_db_session),
):
    """How the events on a day change the given meal"""
    events = CalendarService.get_events_for_range(db, user_id, day, day)
    return CalendarService.get_meal_modifications(events, day, meal_type)


@router.get("/events/{event_id}", response_model=CalendarEventResponse)
def get_event(event_id: UUID, db: Session = Depends(get_db_session)):
    return to_response(CalendarService.get_event(db, event_id))


@router.patch("/events/{event_id}", response_model=CalendarEventResponse)
def update_event(
    event_id: UUID, changes: CalendarEventUpdate, db: Session = Depends(get_db_session)
):
    return to_response(CalendarService.update_event(db, event_id, changes))


@router.delete("/events/{event_id}")
def delete_event(event_id: UUID, db: Session = Depends(get_db_session)):
    CalendarService.delete_event(db, event_id)
    return {"status": "ok", "removed": str(event_id)}
