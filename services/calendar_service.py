"""
Household calendar events and the rules they apply to meal planning.
"""

from calendar import monthrange
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.enums import CalendarEventType, RecurrenceFrequency
from domain.models import CalendarEvent
from domain.schemas.calendar_schemas import (
    CalendarEventCreate,
    CalendarEventUpdate,
    CalendarEventResponse,
    MealModification,
    RecurrenceRule,
)
from repositories import CalendarEventRepository, UserRepository
from app.exceptions import NotFoundError

logger = logging.getLogger("mealplanner.calendar")

SKIP_EVENT_TYPES = {
    CalendarEventType.EATING_OUT,
    CalendarEventType.ORDERING_IN,
    CalendarEventType.TRAVEL,
    CalendarEventType.PARTY,
}
BUSY_DAY_MAX_MINUTES = 30
ADULTS_ONLY_SERVINGS = 2

# freshness preference key -> keywords that fall under it
FRESHNESS_KEYWORDS = {
    "seafood_days": ("seafood", "fish", "shrimp", "salmon"),
    "ground_meat_days": ("ground beef", "ground pork", "ground turkey"),
    "poultry_days": ("chicken", "turkey"),
    "produce_days": ("lettuce", "spinach", "berries"),
}
DEFAULT_FRESHNESS = {
    "seafood_days": 2,
    "ground_meat_days": 2,
    "poultry_days": 3,
    "produce_days": 5,
}
SHELF_STABLE_SCORE = 10


def _add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


def _nth_occurrence(first: date, rule: RecurrenceRule, n: int) -> date:
    # monthly dates are counted from the first date so a 31st clamps without drifting
    steps = rule.interval * n
    if rule.frequency == RecurrenceFrequency.DAILY:
        return first + timedelta(days=steps)
    if rule.frequency == RecurrenceFrequency.WEEKLY:
        return first + timedelta(weeks=steps)
    return _add_months(first, steps)


def to_response(event: CalendarEvent, event_id: str = None, on: date = None) -> CalendarEventResponse:
    return CalendarEventResponse(
        event_id=event_id or str(event.event_id),
        user_id=event.user_id,
        title=event.title,
        event_type=event.event_type,
        date=on or event.date,
        meal_type=event.meal_type,
        notes=event.notes,
        is_recurring=bool(event.is_recurring),
        recurrence=RecurrenceRule.model_validate(event.recurrence) if event.recurrence else None,
        created_at=event.created_at,
    )


def expand_occurrences(event: CalendarEvent, start: date, end: date) -> List[CalendarEventResponse]:
    """Occurrences of ``event`` within [start, end].

    The first occurrence keeps the event id; later ones are ``{event_id}_{n}``.
    A series ends at its end_date, one year after the first date, after
    ``occurrences`` instances or at ``end``, whichever comes first.
    """
    if not event.is_recurring or not event.recurrence:
        if start <= event.date <= end:
            return [to_response(event)]
        return []

    rule = RecurrenceRule.model_validate(event.recurrence)
    limit = min(rule.end_date or date.max, _add_months(event.date, 12), end)

    results = []
    current = event.date
    count = 0
    while current <= limit and (rule.occurrences is None or count < rule.occurrences):
        if current >= start:
            event_id = str(event.event_id) if count == 0 else f"{event.event_id}_{count}"
            results.append(to_response(event, event_id=event_id, on=current))
        count += 1
        current = _nth_occurrence(event.date, rule, count)
    return results


def _applies(event, day: date, meal_type) -> bool:
    if event.date != day:
        return False
    return event.meal_type is None or event.meal_type == meal_type


class CalendarService:
    @staticmethod
    def create_event(db: Session, data: CalendarEventCreate) -> CalendarEvent:
        if not UserRepository(db).exists(data.user_id):
            raise NotFoundError(f"User not found: {data.user_id}")
        values = data.model_dump(mode="json", exclude={"user_id", "date", "event_type", "meal_type"})
        event = CalendarEvent(
            user_id=data.user_id,
            date=data.date,
            event_type=data.event_type,
            meal_type=data.meal_type,
            **values,
        )
        try:
            event = CalendarEventRepository(db).create(event)
        except Exception:
            db.rollback()
            logger.exception(f"calendar_event_create_failed user_id={data.user_id}")
            raise
        logger.info(f"calendar_event_created event_id={event.event_id} type={event.event_type.value}")
        return event

    @staticmethod
    def get_event(db: Session, event_id: UUID) -> CalendarEvent:
        event = CalendarEventRepository(db).get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Calendar event not found: {event_id}")
        return event

    @staticmethod
    def update_event(db: Session, event_id: UUID, changes: CalendarEventUpdate) -> CalendarEvent:
        repo = CalendarEventRepository(db)
        event = repo.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Calendar event not found: {event_id}")
        data = changes.model_dump(exclude_unset=True)
        if "recurrence" in data and changes.recurrence is not None:
            data["recurrence"] = changes.recurrence.model_dump(mode="json")
        try:
            return repo.apply_changes(event, data)
        except Exception:
            db.rollback()
            logger.exception(f"calendar_event_update_failed event_id={event_id}")
            raise

    @staticmethod
    def delete_event(db: Session, event_id: UUID) -> bool:
        if not CalendarEventRepository(db).delete(event_id):
            raise NotFoundError(f"Calendar event not found: {event_id}")
        return True

    @staticmethod
    def list_events(db: Session, user_id: UUID) -> List[CalendarEvent]:
        return CalendarEventRepository(db).get_by_user_id(user_id)

    @staticmethod
    def get_events_for_range(
        db: Session, user_id: UUID, start: date, end: date
    ) -> List[CalendarEventResponse]:
        occurrences = []
        for event in CalendarEventRepository(db).get_candidates_for_range(user_id, end):
            occurrences.extend(expand_occurrences(event, start, end))
        occurrences.sort(key=lambda e: e.date)
        return occurrences

    @staticmethod
    def should_skip_meal(events: Iterable, day: date, meal_type) -> bool:
        return any(
            _applies(e, day, meal_type) and e.event_type in SKIP_EVENT_TYPES for e in events
        )

    @staticmethod
    def get_meal_modifications(events: Iterable, day: date, meal_type) -> MealModification:
        modification = MealModification()
        for event in events:
            if not _applies(event, day, meal_type):
                continue
            if event.event_type in SKIP_EVENT_TYPES:
                modification.skip = True
            elif event.event_type == CalendarEventType.KIDS_ONLY:
                modification.name_suffix = " (Kids Version)"
            elif event.event_type == CalendarEventType.DATE_NIGHT:
                modification.name_suffix = " (Date Night Special)"
            elif event.event_type == CalendarEventType.ADULTS_ONLY:
                modification.servings = ADULTS_ONLY_SERVINGS
            elif event.event_type == CalendarEventType.BUSY_DAY:
                modification.max_total_minutes = BUSY_DAY_MAX_MINUTES
            else:
                continue
            modification.reasons.append(event.event_type.value)
        return modification

    @staticmethod
    def get_freshness_score(
        ingredient_names: Iterable[str], freshness: Optional[Dict[str, int]] = None
    ) -> int:
        """Days until the most perishable ingredient spoils (lower is cooked sooner)"""
        limits = {**DEFAULT_FRESHNESS, **(freshness or {})}
        score = SHELF_STABLE_SCORE
        for name in ingredient_names:
            lowered = (name or "").lower()
            for key, keywords in FRESHNESS_KEYWORDS.items():
                if any(k in lowered for k in keywords):
                    score = min(score, limits[key])
        return score
