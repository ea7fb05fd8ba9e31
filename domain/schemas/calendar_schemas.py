from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from domain.enums import CalendarEventType, MealType, RecurrenceFrequency


class RecurrenceRule(BaseModel):
    frequency: RecurrenceFrequency
    interval: int = Field(default=1, ge=1, le=52)
    end_date: Optional[date_type] = None
    occurrences: Optional[int] = Field(None, ge=1, le=366)


class CalendarEventCreate(BaseModel):
    user_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    event_type: CalendarEventType
    date: date_type
    meal_type: Optional[MealType] = None
    notes: Optional[str] = None
    is_recurring: bool = False
    recurrence: Optional[RecurrenceRule] = None

    @model_validator(mode="after")
    def recurrence_required(self):
        if self.is_recurring and self.recurrence is None:
            raise ValueError("Recurring events need a recurrence rule")
        return self


class CalendarEventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    event_type: Optional[CalendarEventType] = None
    date: Optional[date_type] = None
    meal_type: Optional[MealType] = None
    notes: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurrence: Optional[RecurrenceRule] = None


class CalendarEventResponse(BaseModel):
    event_id: str
    user_id: UUID
    title: str
    event_type: CalendarEventType
    date: date_type
    meal_type: Optional[MealType] = None
    notes: Optional[str] = None
    is_recurring: bool = False
    recurrence: Optional[RecurrenceRule] = None
    created_at: Optional[datetime] = None


class MealModification(BaseModel):
    skip: bool = False
    name_suffix: Optional[str] = None
    servings: Optional[int] = None
    max_total_minutes: Optional[int] = None
    reasons: List[str] = []
