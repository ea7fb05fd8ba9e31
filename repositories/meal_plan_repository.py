"""
Meal Plan Repository - Data access for weekly plans and their meals
"""

from typing import List, Optional
from uuid import UUID
from datetime import date, timedelta
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import and_

from repositories.base import BaseRepository
from domain.models import MealPlan, MealEntry


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def get_with_meals(self, meal_plan_id: UUID) -> Optional[MealPlan]:
        return (
            self.db.query(MealPlan)
            .options(selectinload(MealPlan.meals))
            .filter(MealPlan.meal_plan_id == meal_plan_id)
            .first()
        )

    def get_by_user_id(self, user_id: UUID) -> List[MealPlan]:
        """Plans for a user, latest week first"""
        return (
            self.db.query(MealPlan)
            .filter(MealPlan.user_id == user_id)
            .order_by(MealPlan.week_start_date.desc(), MealPlan.created_at.desc())
            .all()
        )

    def get_covering_date(self, user_id: UUID, day: date) -> Optional[MealPlan]:
        """Most recently created plan whose 7-day window contains ``day``"""
        earliest_start = day - timedelta(days=6)
        return (
            self.db.query(MealPlan)
            .filter(
                and_(
                    MealPlan.user_id == user_id,
                    MealPlan.week_start_date <= day,
                    MealPlan.week_start_date >= earliest_start,
                )
            )
            .order_by(MealPlan.created_at.desc(), MealPlan.week_start_date.desc())
            .first()
        )


class MealEntryRepository(BaseRepository[MealEntry]):
    """Repository for individual meals"""

    def __init__(self, db: Session):
        super().__init__(db, MealEntry)

    def get_in_plan(self, meal_plan_id: UUID, meal_id: UUID) -> Optional[MealEntry]:
        return (
            self.db.query(MealEntry)
            .filter(
                and_(
                    MealEntry.meal_plan_id == meal_plan_id,
                    MealEntry.meal_id == meal_id,
                )
            )
            .first()
        )
