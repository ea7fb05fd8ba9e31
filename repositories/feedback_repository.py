"""
Feedback Repository - Data access for meal feedback
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MealFeedback


class MealFeedbackRepository(BaseRepository[MealFeedback]):
    """Repository for meal feedback"""

    def __init__(self, db: Session):
        super().__init__(db, MealFeedback)

    def get_by_user_id(self, user_id: UUID, limit: Optional[int] = None) -> List[MealFeedback]:
        """Feedback for a user, newest first"""
        query = (
            self.db.query(MealFeedback)
            .filter(MealFeedback.user_id == user_id)
            .order_by(MealFeedback.created_at.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_latest_for_meal(self, user_id: UUID, meal_id: UUID) -> Optional[MealFeedback]:
        return (
            self.db.query(MealFeedback)
            .filter(MealFeedback.user_id == user_id, MealFeedback.meal_id == meal_id)
            .order_by(MealFeedback.created_at.desc())
            .first()
        )
