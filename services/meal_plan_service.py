"""
Weekly meal plan generation, storage and meal swaps.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.constants import MAX_MEAL_SWAPS_PER_WEEK
from domain.enums import BudgetStatus
from domain.mappers import MealPlanMapper
from domain.models import MealPlan, MealEntry
from domain.schemas.plan_schemas import (
    BudgetAnalysisResponse,
    GeneratePlanRequest,
    MealDraft,
)
from repositories import GroceryListRepository, MealPlanRepository, MealEntryRepository
from services.ai_service import AIService
from services.budget_service import BudgetService
from services.household_service import HouseholdService
from services.pantry_service import PantryService
from services.profile_service import ProfileService
from app.exceptions import ConflictError, NotFoundError

logger = logging.getLogger("mealplanner.plans")


def default_week_start(today: Optional[date] = None) -> date:
    """Plans start tomorrow unless a start date is given"""
    return (today or date.today()) + timedelta(days=1)


def _meal_columns(draft: MealDraft) -> dict:
    return draft.model_dump(mode="json", exclude={"meal_type", "meal_id"})


class MealPlanService:
    @staticmethod
    def calculate_budget_status(total_cost: float, weekly_budget: float) -> BudgetStatus:
        return BudgetService.calculate_budget_status(total_cost, weekly_budget)

    @staticmethod
    def save_plan(
        db: Session,
        user_id: UUID,
        week_start: date,
        meals: Iterable[MealDraft],
        weekly_budget: float,
    ) -> MealPlan:
        """Persist a plan and its meals; total and status are computed from the meals"""
        meals = list(meals)
        total = round(sum(m.estimated_cost for m in meals), 2)
        plan = MealPlan(
            user_id=user_id,
            week_start_date=week_start,
            total_estimated_cost=total,
            weekly_budget=weekly_budget,
            budget_status=BudgetService.calculate_budget_status(total, weekly_budget),
            swap_count=0,
        )
        plan.meals = [
            MealEntry(position=position, meal_type=meal.meal_type, **_meal_columns(meal))
            for position, meal in enumerate(meals)
        ]
        try:
            db.add(plan)
            db.commit()
            db.refresh(plan)
        except Exception:
            db.rollback()
            logger.exception(f"meal_plan_save_failed user_id={user_id}")
            raise
        logger.info(
            f"meal_plan_saved plan_id={plan.meal_plan_id} user_id={user_id} "
            f"meals={len(meals)} total={total} status={plan.budget_status.value}"
        )
        return plan

    @staticmethod
    def generate_weekly_plan(db: Session, request: GeneratePlanRequest) -> MealPlan:
        profile = ProfileService.get_user(db, request.user_id)
        household = HouseholdService.get_household_preferences(db, request.user_id)
        pantry = [item.name for item in PantryService.list_items(db, request.user_id)]

        draft = AIService.generate_meal_plan(
            profile,
            household=household,
            pantry_items=pantry,
            exclude_recipes=request.exclude_recipes,
            preferred_cuisines=request.preferred_cuisines,
        )
        return MealPlanService.save_plan(
            db,
            request.user_id,
            request.week_start or default_week_start(),
            draft.meals,
            float(profile.weekly_budget),
        )

    @staticmethod
    def get_plan(db: Session, meal_plan_id: UUID) -> MealPlan:
        plan = MealPlanRepository(db).get_with_meals(meal_plan_id)
        if not plan:
            raise NotFoundError(f"Meal plan not found: {meal_plan_id}")
        return plan

    @staticmethod
    def list_plans(db: Session, user_id: UUID) -> List[MealPlan]:
        return MealPlanRepository(db).get_by_user_id(user_id)

    @staticmethod
    def delete_plan(db: Session, meal_plan_id: UUID) -> bool:
        GroceryListRepository(db).delete_for_plan(meal_plan_id)
        if not MealPlanRepository(db).delete(meal_plan_id):
            raise NotFoundError(f"Meal plan not found: {meal_plan_id}")
        logger.info(f"meal_plan_deleted plan_id={meal_plan_id}")
        return True

    @staticmethod
    def get_current_week_plan(
        db: Session, user_id: UUID, today: Optional[date] = None
    ) -> Optional[MealPlan]:
        return MealPlanRepository(db).get_covering_date(user_id, default_week_start(today))

    @staticmethod
    def swap_meal(db: Session, meal_plan_id: UUID, meal_id: UUID) -> MealPlan:
        plan = MealPlanService.get_plan(db, meal_plan_id)
        if (plan.swap_count or 0) >= MAX_MEAL_SWAPS_PER_WEEK:
            raise ConflictError(
                f"Maximum of {MAX_MEAL_SWAPS_PER_WEEK} meal swaps per plan reached",
                code="SWAP_LIMIT_REACHED",
            )

        entry = MealEntryRepository(db).get_in_plan(meal_plan_id, meal_id)
        if not entry:
            raise NotFoundError(f"Meal not found in plan: {meal_id}")

        profile = ProfileService.get_user(db, plan.user_id)
        household = HouseholdService.get_household_preferences(db, plan.user_id)
        exclude = sorted({m.recipe_name for m in plan.meals})
        replacement = AIService.suggest_meal_swap(
            MealPlanMapper.meal_to_response(entry), profile, exclude, household
        )

        try:
            entry.meal_type = replacement.meal_type
            columns = _meal_columns(replacement)
            columns.pop("day_of_week", None)
            for key, value in columns.items():
                setattr(entry, key, value)

            total = round(sum(float(m.estimated_cost or 0) for m in plan.meals), 2)
            plan.total_estimated_cost = total
            plan.budget_status = BudgetService.calculate_budget_status(
                total, float(plan.weekly_budget or profile.weekly_budget)
            )
            plan.swap_count = (plan.swap_count or 0) + 1
            db.commit()
            db.refresh(plan)
        except Exception:
            db.rollback()
            logger.exception(f"meal_swap_failed plan_id={meal_plan_id} meal_id={meal_id}")
            raise

        logger.info(
            f"meal_swapped plan_id={meal_plan_id} meal_id={meal_id} "
            f"new_recipe={entry.recipe_name!r} swap_count={plan.swap_count}"
        )
        return plan

    @staticmethod
    def analyze_budget(db: Session, meal_plan_id: UUID) -> BudgetAnalysisResponse:
        plan = MealPlanService.get_plan(db, meal_plan_id)
        profile = ProfileService.get_user(db, plan.user_id)
        budget = float(plan.weekly_budget or profile.weekly_budget)
        return BudgetService.analyze_budget(
            MealPlanMapper.to_response(plan), budget, profile.household_size
        )

    @staticmethod
    def get_cooking_tips(db: Session, meal_plan_id: UUID, meal_id: UUID) -> List[str]:
        plan = MealPlanService.get_plan(db, meal_plan_id)
        entry = MealEntryRepository(db).get_in_plan(meal_plan_id, meal_id)
        if not entry:
            raise NotFoundError(f"Meal not found in plan: {meal_id}")
        profile = ProfileService.get_user(db, plan.user_id)
        return AIService.get_cooking_tips(MealPlanMapper.meal_to_response(entry), profile)
