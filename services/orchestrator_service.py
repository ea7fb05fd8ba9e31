"""
End-to-end plan generation: budget retries, calendar rules, freshness
ordering, recipe enrichment, persistence and the grocery list.
"""

from datetime import timedelta
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from app.config import settings
from app.exceptions import ExternalServiceError, NotFoundError, RateLimitError
from domain.constants import DAYS_PER_PLAN, PLANNED_MEAL_TYPES
from domain.enums import BudgetStatus, MealType
from domain.mappers import MealPlanMapper
from domain.models import MealPlan
from domain.schemas.calendar_schemas import CalendarEventResponse
from domain.schemas.plan_schemas import (
    CompletePlanRequest,
    MealDraft,
    MealInstructionsResponse,
)
from repositories import MealEntryRepository
from services.ai_service import AIService
from services.budget_service import BudgetService
from services.calendar_service import CalendarService
from services.grocery_service import GroceryService
from services.household_service import HouseholdService
from services.meal_plan_service import MealPlanService, default_week_start
from services.pantry_service import PantryService
from services.preferences_service import PreferencesService
from services.profile_service import ProfileService
from services.recipe_service import RecipeService

logger = logging.getLogger("mealplanner.orchestrator")

BUDGET_RETRY_FACTOR = 0.9
MEALS_PER_DAY = len(PLANNED_MEAL_TYPES)


def apply_calendar(
    meals: List[MealDraft], events: List[CalendarEventResponse], week_start
) -> List[MealDraft]:
    """Drop or adjust meals according to the calendar events on their day"""
    kept = []
    for meal in meals:
        day = week_start + timedelta(days=meal.day_of_week)
        modification = CalendarService.get_meal_modifications(events, day, meal.meal_type)
        if modification.skip:
            continue
        if (
            modification.max_total_minutes is not None
            and meal.prep_time + meal.cook_time > modification.max_total_minutes
        ):
            continue

        changes = {}
        if modification.name_suffix:
            changes["recipe_name"] = meal.recipe_name + modification.name_suffix
        if modification.servings is not None:
            changes["servings"] = modification.servings
        kept.append(meal.model_copy(update=changes) if changes else meal)
    return kept


def order_by_freshness(meals: List[MealDraft], freshness: Optional[dict] = None) -> List[MealDraft]:
    """Most perishable meals first, then slots refilled breakfast, lunch, dinner per day"""
    scored = sorted(
        meals,
        key=lambda m: CalendarService.get_freshness_score(
            [i.name for i in m.ingredients], freshness
        ),
    )
    return [
        meal.model_copy(
            update={
                "day_of_week": min(index // MEALS_PER_DAY, DAYS_PER_PLAN - 1),
                "meal_type": MealType(PLANNED_MEAL_TYPES[index % MEALS_PER_DAY]),
            }
        )
        for index, meal in enumerate(scored)
    ]


def enrich_meal(meal: MealDraft) -> MealDraft:
    """Attach recipe details from the recipe API, falling back to AI instructions"""
    results = RecipeService.search_recipes(query=meal.recipe_name, number=1)
    if results:
        recipe = results[0]
        return meal.model_copy(
            update={
                "recipe_id": recipe.id,
                "image_url": recipe.image or meal.image_url,
                "instructions": recipe.instructions or meal.instructions,
                "nutrition": recipe.nutrition.model_dump() if recipe.nutrition else meal.nutrition,
            }
        )
    if meal.instructions:
        return meal
    try:
        return meal.model_copy(update={"instructions": AIService.get_meal_instructions(meal)})
    except (ExternalServiceError, RateLimitError) as exc:
        logger.warning(f"meal_instructions_unavailable recipe={meal.recipe_name!r} error={exc}")
        return meal


class OrchestratorService:
    @staticmethod
    def generate_complete_plan(db: Session, request: CompletePlanRequest) -> MealPlan:
        profile = ProfileService.get_user(db, request.user_id)
        household = HouseholdService.get_household_preferences(db, request.user_id)
        pantry = [item.name for item in PantryService.list_items(db, request.user_id)]
        week_start = request.week_start or default_week_start()
        weekly_budget = float(profile.weekly_budget)

        # 1. generate, tightening the budget while the plan comes back over
        target_budget = weekly_budget
        attempt = 0
        while True:
            draft = AIService.generate_meal_plan(
                profile,
                household=household,
                pantry_items=pantry,
                exclude_recipes=request.exclude_recipes,
                preferred_cuisines=request.preferred_cuisines,
                weekly_budget=target_budget,
            )
            status = BudgetService.calculate_budget_status(
                draft.total_estimated_cost, weekly_budget
            )
            if status != BudgetStatus.OVER or attempt >= request.max_retries:
                break
            attempt += 1
            target_budget = round(target_budget * BUDGET_RETRY_FACTOR, 2)
            logger.info(
                f"plan_over_budget user_id={request.user_id} total={draft.total_estimated_cost} "
                f"retry={attempt} target_budget={target_budget}"
            )

        # 2. calendar
        events = CalendarService.get_events_for_range(
            db, request.user_id, week_start, week_start + timedelta(days=DAYS_PER_PLAN - 1)
        )
        meals = apply_calendar(draft.meals, events, week_start)

        # 3. freshness
        if request.optimize_freshness:
            preferences = PreferencesService.get_meal_plan_preferences(db, request.user_id)
            meals = order_by_freshness(meals, preferences.freshness.model_dump())

        # 4. enrichment
        if settings.use_real_recipes and RecipeService.is_available():
            meals = [enrich_meal(m) for m in meals]

        # 5. persist, then the grocery list on a best-effort basis
        plan = MealPlanService.save_plan(db, request.user_id, week_start, meals, weekly_budget)
        if request.generate_grocery_list:
            try:
                GroceryService.generate_from_plan(
                    db, plan.meal_plan_id, include_pantry=request.include_pantry
                )
                db.refresh(plan)
            except Exception:
                logger.exception(f"grocery_list_step_failed plan_id={plan.meal_plan_id}")

        logger.info(
            f"complete_plan_generated plan_id={plan.meal_plan_id} meals={len(meals)} "
            f"skipped={len(draft.meals) - len(meals)} budget_retries={attempt}"
        )
        return plan

    @staticmethod
    def get_meal_instructions(
        db: Session, meal_plan_id: UUID, meal_id: UUID
    ) -> MealInstructionsResponse:
        entry = MealEntryRepository(db).get_in_plan(meal_plan_id, meal_id)
        if not entry:
            raise NotFoundError(f"Meal not found in plan: {meal_id}")
        meal = MealPlanMapper.meal_to_response(entry)

        instructions: List[str] = []
        source = "recipe_api"
        if RecipeService.is_available():
            recipe = None
            if meal.recipe_id and meal.recipe_id.isdigit():
                recipe = RecipeService.get_recipe(meal.recipe_id)
            if recipe is None:
                results = RecipeService.search_recipes(query=meal.recipe_name, number=1)
                recipe = results[0] if results else None
            if recipe is not None:
                instructions = recipe.instructions

        if not instructions:
            source = "ai"
            instructions = AIService.get_meal_instructions(meal)

        try:
            entry.instructions = instructions
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"meal_instructions_save_failed meal_id={meal_id}")
            raise

        return MealInstructionsResponse(
            meal_id=meal.meal_id,
            recipe_name=meal.recipe_name,
            instructions=instructions,
            source=source,
        )
