"""
Calendar Repository - Data access for calendar events
"""

from typing import List
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import CalendarEvent


class CalendarEventRepository(BaseRepository[CalendarEvent]):
    """Repository for calendar events"""

    def __init__(self, db: Session):
        super().__init__(db, CalendarEvent)

    def get_by_user_id(self, user_id: UUID) -> List[CalendarEvent]:
        return (
            self.db.query(CalendarEvent)
            .filter(CalendarEvent.user_id == user_id)
            .order_by(CalendarEvent.date)
            .all()
        )

    def get_candidates_for_range(self, user_id: UUID, end: date) -> List[CalendarEvent]:
        """Events that could produce an occurrence on or before ``end``.

        The service expands recurrences and drops anything before the range start.
        """
        return (
            self.db.query(CalendarEvent)
            .filter(CalendarEvent.user_id == user_id, CalendarEvent.date <= end)
            .order_by(CalendarEvent.date)
            .all()
        )
