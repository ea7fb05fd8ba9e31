"""
Meal plan and grocery list mappers.
"""

from domain.models import MealPlan, MealEntry, GroceryList
from domain.schemas.plan_schemas import (
    Ingredient,
    MealResponse,
    MealPlanResponse,
    MealPlanSummary,
)
from domain.schemas.grocery_schemas import (
    GroceryListResponse,
    GroceryItemResponse,
    BudgetComparison,
    CostSavingSwap,
)


class MealPlanMapper:
    """Builds plan responses from ORM rows (ingredients are stored as JSON)."""

    @staticmethod
    def meal_to_response(meal: MealEntry) -> MealResponse:
        return MealResponse(
            meal_id=meal.meal_id,
            day_of_week=meal.day_of_week,
            meal_type=meal.meal_type,
            recipe_name=meal.recipe_name,
            description=meal.description,
            prep_time=meal.prep_time or 0,
            cook_time=meal.cook_time or 0,
            servings=meal.servings or 1,
            estimated_cost=float(meal.estimated_cost or 0),
            ingredients=[Ingredient.model_validate(i) for i in meal.ingredients or []],
            instructions=meal.instructions or [],
            recipe_id=meal.recipe_id,
            image_url=meal.image_url,
            nutrition=meal.nutrition,
            notes=meal.notes,
        )

    @staticmethod
    def to_response(plan: MealPlan) -> MealPlanResponse:
        return MealPlanResponse(
            meal_plan_id=plan.meal_plan_id,
            user_id=plan.user_id,
            week_start_date=plan.week_start_date,
            meals=[MealPlanMapper.meal_to_response(m) for m in plan.meals],
            total_estimated_cost=float(plan.total_estimated_cost or 0),
            weekly_budget=(
                float(plan.weekly_budget) if plan.weekly_budget is not None else None
            ),
            budget_status=plan.budget_status,
            swap_count=plan.swap_count or 0,
            grocery_list_id=plan.grocery_list_id,
            created_at=plan.created_at,
        )

    @staticmethod
    def to_summary(plan: MealPlan) -> MealPlanSummary:
        return MealPlanSummary.model_validate(plan)


class GroceryListMapper:
    @staticmethod
    def to_response(grocery_list: GroceryList) -> GroceryListResponse:
        comparison = None
        if grocery_list.budget_comparison:
            comparison = BudgetComparison.model_validate(grocery_list.budget_comparison)

        return GroceryListResponse(
            grocery_list_id=grocery_list.grocery_list_id,
            user_id=grocery_list.user_id,
            meal_plan_id=grocery_list.meal_plan_id,
            items=[GroceryItemResponse.model_validate(i) for i in grocery_list.items],
            total_cost=float(grocery_list.total_cost or 0),
            budget_comparison=comparison,
            suggested_swaps=[
                CostSavingSwap.model_validate(s)
                for s in grocery_list.suggested_swaps or []
            ],
            created_at=grocery_list.created_at,
        )
