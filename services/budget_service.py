"""
Budget analysis for meal plans.
"""

from typing import Any, Dict, Iterable, List, Optional
import logging

from domain.enums import BudgetStatus
from domain.schemas.plan_schemas import BudgetAnalysisResponse, SavingsOpportunity

logger = logging.getLogger("mealplanner.budget")

SUBSTITUTION_SUGGESTIONS = {
    "chicken breast": "Try chicken thighs - they're more flavorful and cost 30% less",
    "beef": "Ground turkey or lentils can provide similar protein at lower cost",
    "salmon": "Tilapia or cod offer similar nutrition for half the price",
    "organic vegetables": "Regular or frozen vegetables provide the same nutrition",
    "pine nuts": "Almonds or sunflower seeds work great in most recipes",
    "parmesan cheese": "Romano cheese or nutritional yeast are budget-friendly alternatives",
}
DEFAULT_SUGGESTION = "Look for seasonal alternatives or buy in bulk to save money"

EXPENSIVE_INGREDIENT_PRICE = 5.0
MAX_OPPORTUNITIES = 5


def _value(obj: Any, key: str, default=None):
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _enum_value(value) -> str:
    return getattr(value, "value", value)


class BudgetService:
    @staticmethod
    def calculate_budget_status(total_cost: float, weekly_budget: float) -> BudgetStatus:
        """under when cost <= 95% of budget, at up to 105%, over beyond that"""
        if not weekly_budget or weekly_budget <= 0:
            return BudgetStatus.OVER if total_cost > 0 else BudgetStatus.UNDER
        ratio = total_cost / weekly_budget
        if ratio <= 0.95:
            return BudgetStatus.UNDER
        if ratio <= 1.05:
            return BudgetStatus.AT
        return BudgetStatus.OVER

    @staticmethod
    def cost_per_serving(meal) -> float:
        servings = _value(meal, "servings") or 1
        return float(_value(meal, "estimated_cost") or 0) / servings

    @staticmethod
    def substitution_suggestion(ingredient_name: str) -> str:
        lowered = ingredient_name.lower()
        for key, suggestion in SUBSTITUTION_SUGGESTIONS.items():
            if key in lowered:
                return suggestion
        return DEFAULT_SUGGESTION

    @staticmethod
    def meal_type_breakdown(meals: Iterable) -> Dict[str, float]:
        breakdown = {"breakfast": 0.0, "lunch": 0.0, "dinner": 0.0}
        for meal in meals:
            meal_type = _enum_value(_value(meal, "meal_type"))
            breakdown[meal_type] = round(
                breakdown.get(meal_type, 0.0) + float(_value(meal, "estimated_cost") or 0), 2
            )
        return breakdown

    @staticmethod
    def category_breakdown(meals: Iterable) -> Dict[str, float]:
        breakdown: Dict[str, float] = {}
        for meal in meals:
            for ingredient in _value(meal, "ingredients") or []:
                category = _value(ingredient, "category") or "Other"
                price = float(_value(ingredient, "estimated_price") or 0)
                breakdown[category] = round(breakdown.get(category, 0.0) + price, 2)
        return breakdown

    @staticmethod
    def savings_opportunities(
        meals: List, total_cost: float, weekly_budget: float, household_size: int
    ) -> List[SavingsOpportunity]:
        opportunities: List[SavingsOpportunity] = []

        status = BudgetService.calculate_budget_status(total_cost, weekly_budget)
        if status == BudgetStatus.OVER:
            overage = total_cost - weekly_budget
            opportunities.append(
                SavingsOpportunity(
                    type="meal_swap",
                    description="Replace expensive meals with budget-friendly alternatives",
                    potential_savings=round(overage * 0.6, 2),
                    suggestion="Consider swapping your most expensive meals for similar but cheaper options",
                )
            )

        ingredients = [i for meal in meals for i in (_value(meal, "ingredients") or [])]
        expensive = sorted(
            (i for i in ingredients if float(_value(i, "estimated_price") or 0) > EXPENSIVE_INGREDIENT_PRICE),
            key=lambda i: float(_value(i, "estimated_price") or 0),
            reverse=True,
        )[:3]
        for ingredient in expensive:
            name = _value(ingredient, "name")
            opportunities.append(
                SavingsOpportunity(
                    type="ingredient_substitution",
                    description=f"{name} is expensive - consider alternatives",
                    potential_savings=round(float(_value(ingredient, "estimated_price")) * 0.3, 2),
                    ingredient_name=name,
                    suggestion=BudgetService.substitution_suggestion(name),
                )
            )

        for meal in meals:
            servings = _value(meal, "servings") or 0
            cost = float(_value(meal, "estimated_cost") or 0)
            if servings > household_size and cost > 15:
                opportunities.append(
                    SavingsOpportunity(
                        type="portion_adjustment",
                        description=f"{_value(meal, 'recipe_name')} portions could be reduced",
                        potential_savings=round(cost * 0.2, 2),
                        meal_id=_value(meal, "meal_id"),
                        suggestion=f"Adjust serving size from {servings} to {household_size} people",
                    )
                )

        opportunities.sort(key=lambda o: o.potential_savings, reverse=True)
        return opportunities[:MAX_OPPORTUNITIES]

    @staticmethod
    def analyze_budget(
        plan, weekly_budget: float, household_size: Optional[int] = None
    ) -> BudgetAnalysisResponse:
        """Summarize a plan's cost against the weekly budget"""
        meals = list(_value(plan, "meals") or [])
        total_cost = float(_value(plan, "total_estimated_cost") or 0)
        household_size = household_size or 4

        percentage = round(total_cost / weekly_budget * 100) if weekly_budget else 0
        analysis = BudgetAnalysisResponse(
            total_cost=round(total_cost, 2),
            weekly_budget=weekly_budget,
            budget_status=BudgetService.calculate_budget_status(total_cost, weekly_budget),
            budget_percentage=percentage,
            daily_average=round(total_cost / 7, 2),
            cost_breakdown=BudgetService.meal_type_breakdown(meals),
            category_breakdown=BudgetService.category_breakdown(meals),
            savings_opportunities=BudgetService.savings_opportunities(
                meals, total_cost, weekly_budget, household_size
            ),
        )
        logger.info(
            f"budget_analyzed total={analysis.total_cost} budget={weekly_budget} "
            f"status={analysis.budget_status.value}"
        )
        return analysis
