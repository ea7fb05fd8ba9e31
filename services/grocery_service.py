"""
Grocery list generation from meal plans.

Ingredients are merged by normalized name, reduced by what the pantry already
holds, sorted into shopping order and priced against the plan budget.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging
import re

from domain.constants import MAX_GROCERY_LIST_ITEMS
from domain.enums import BudgetStatus
from domain.models import GroceryList, GroceryListItem, MealPlan
from domain.schemas.grocery_schemas import (
    BudgetComparison,
    CostSavingSwap,
    GroceryItemUpdate,
)
from repositories import (
    GroceryListRepository,
    GroceryListItemRepository,
    MealPlanRepository,
    PantryRepository,
)
from services.budget_service import BudgetService
from app.exceptions import NotFoundError

logger = logging.getLogger("mealplanner.grocery")

CATEGORY_ORDER = ["produce", "meat", "dairy", "pantry", "frozen", "other"]
SWAP_PRICE_THRESHOLD = 5.0

# ingredient keyword -> (alternative, price factor, reason)
CHEAPER_ALTERNATIVES = {
    "chicken breast": [
        ("chicken thighs", 0.7, "More affordable cut with similar protein"),
        ("ground chicken", 0.8, "Versatile and budget-friendly"),
    ],
    "beef": [
        ("ground beef", 0.6, "More affordable option"),
        ("chicken", 0.5, "Leaner and cheaper protein"),
    ],
    "salmon": [
        ("tilapia", 0.4, "Budget-friendly white fish"),
        ("canned salmon", 0.5, "Affordable with same omega-3s"),
    ],
    "organic": [
        ("conventional", 0.6, "Same nutrition at lower cost"),
    ],
}

_NUMBER_RE = re.compile(r"(\d+\.?\d*)")


@dataclass
class AggregatedIngredient:
    name: str
    amount: float
    unit: str
    category: str
    price: float
    in_pantry: bool = False
    pantry_quantity: Optional[str] = None


def normalize_name(name: str) -> str:
    lowered = name.lower().strip()
    return lowered[:-1] if lowered.endswith("s") else lowered


def parse_quantity(quantity: Optional[str]) -> float:
    match = _NUMBER_RE.search(quantity or "")
    return float(match.group(1)) if match else 0.0


def format_amount(amount: float) -> str:
    if amount == int(amount):
        return str(int(amount))
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def category_rank(category: str) -> int:
    words = (category or "").lower().split()
    head = words[0] if words else ""
    return CATEGORY_ORDER.index(head) if head in CATEGORY_ORDER else len(CATEGORY_ORDER)


def _field(obj, key, default=None):
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def aggregate_ingredients(meals: Iterable) -> Dict[str, AggregatedIngredient]:
    aggregated: Dict[str, AggregatedIngredient] = {}
    for meal in meals:
        for ingredient in _field(meal, "ingredients") or []:
            name = _field(ingredient, "name") or ""
            unit = _field(ingredient, "unit") or ""
            amount = float(_field(ingredient, "amount") or 0)
            price = float(_field(ingredient, "estimated_price") or 0)

            key = normalize_name(name)
            existing = aggregated.get(key)
            if existing is not None and existing.unit != unit:
                key = f"{key} ({unit})"
                name = f"{name} ({unit})"
                existing = aggregated.get(key)

            if existing is None:
                aggregated[key] = AggregatedIngredient(
                    name=name,
                    amount=amount,
                    unit=unit,
                    category=_field(ingredient, "category") or "other",
                    price=price,
                )
            else:
                existing.amount += amount
                existing.price += price
    return aggregated


def subtract_pantry(
    aggregated: Dict[str, AggregatedIngredient], pantry_items: Iterable
) -> Dict[str, AggregatedIngredient]:
    """Reduce amounts by pantry stock; fully covered items stay on the list at no cost"""
    pantry = {normalize_name(p.name): p for p in pantry_items}
    for key, ingredient in aggregated.items():
        item = pantry.get(key)
        if item is None:
            continue
        ingredient.pantry_quantity = item.quantity
        on_hand = parse_quantity(item.quantity)
        if on_hand >= ingredient.amount:
            ingredient.in_pantry = True
            ingredient.price = 0.0
        elif on_hand > 0:
            needed = ingredient.amount - on_hand
            ingredient.price = ingredient.price * (needed / ingredient.amount)
            ingredient.amount = needed
    return aggregated


def sort_items(ingredients: Iterable[AggregatedIngredient]) -> List[AggregatedIngredient]:
    return sorted(ingredients, key=lambda i: (category_rank(i.category), i.name.lower()))


def find_cheaper_alternatives(name: str, price: float) -> List[dict]:
    lowered = name.lower()
    matches: List[dict] = []
    for key, alternatives in CHEAPER_ALTERNATIVES.items():
        if key in lowered:
            matches = [
                {
                    "name": lowered.replace(key, alternative),
                    "price": price * factor,
                    "reason": reason,
                }
                for alternative, factor, reason in alternatives
            ]
    return sorted(matches, key=lambda m: m["price"])


def suggest_swaps(
    items: Iterable[AggregatedIngredient], target_savings: float
) -> List[CostSavingSwap]:
    """Swap the priciest items for cheaper alternatives until the target is met"""
    swaps: List[CostSavingSwap] = []
    saved = 0.0
    for item in sorted(items, key=lambda i: i.price, reverse=True):
        if saved >= target_savings:
            break
        if item.price <= SWAP_PRICE_THRESHOLD:
            continue
        alternatives = find_cheaper_alternatives(item.name, item.price)
        if not alternatives:
            continue
        best = alternatives[0]
        savings = round(item.price - best["price"], 2)
        swaps.append(
            CostSavingSwap(
                original_item=item.name,
                suggested_item=best["name"],
                savings=savings,
                reason=best["reason"],
            )
        )
        saved += savings
    return swaps


class GroceryService:
    @staticmethod
    def build_items(plan: MealPlan, pantry_items: Iterable = ()) -> List[AggregatedIngredient]:
        aggregated = aggregate_ingredients(plan.meals)
        subtract_pantry(aggregated, pantry_items)
        items = sort_items(aggregated.values())
        if len(items) > MAX_GROCERY_LIST_ITEMS:
            logger.warning(
                f"grocery_list_truncated plan_id={plan.meal_plan_id} items={len(items)}"
            )
            items = items[:MAX_GROCERY_LIST_ITEMS]
        return items

    @staticmethod
    def generate_from_plan(
        db: Session, meal_plan_id: UUID, include_pantry: bool = True
    ) -> GroceryList:
        plan = MealPlanRepository(db).get_with_meals(meal_plan_id)
        if not plan:
            raise NotFoundError(f"Meal plan not found: {meal_plan_id}")

        pantry = PantryRepository(db).get_by_user_id(plan.user_id) if include_pantry else []
        items = GroceryService.build_items(plan, pantry)
        total = round(sum(i.price for i in items), 2)

        plan_total = float(plan.total_estimated_cost or 0)
        target = plan_total * 0.9 if plan.budget_status == BudgetStatus.OVER else plan_total
        swaps = suggest_swaps(items, total - target) if total > target else []

        budget = float(plan.weekly_budget or 0)
        comparison = BudgetComparison(
            budget=budget,
            difference=round(total - budget, 2),
            status=BudgetService.calculate_budget_status(total, budget),
        )

        grocery_list = GroceryList(
            user_id=plan.user_id,
            meal_plan_id=plan.meal_plan_id,
            total_cost=total,
            budget_comparison=comparison.model_dump(mode="json"),
            suggested_swaps=[s.model_dump() for s in swaps],
        )
        grocery_list.items = [
            GroceryListItem(
                position=position,
                name=item.name,
                quantity=f"{format_amount(item.amount)} {item.unit}".strip(),
                category=item.category,
                estimated_price=round(item.price, 2),
                is_in_pantry=item.in_pantry,
                pantry_quantity=item.pantry_quantity,
            )
            for position, item in enumerate(items)
        ]

        try:
            GroceryListRepository(db).delete_for_plan(plan.meal_plan_id)
            db.add(grocery_list)
            db.flush()
            plan.grocery_list_id = grocery_list.grocery_list_id
            db.commit()
            db.refresh(grocery_list)
        except Exception:
            db.rollback()
            logger.exception(f"grocery_list_generate_failed plan_id={meal_plan_id}")
            raise

        logger.info(
            f"grocery_list_generated list_id={grocery_list.grocery_list_id} "
            f"plan_id={meal_plan_id} items={len(items)} total={total} swaps={len(swaps)}"
        )
        return grocery_list

    @staticmethod
    def get_list(db: Session, grocery_list_id: UUID) -> GroceryList:
        grocery_list = GroceryListRepository(db).get_with_items(grocery_list_id)
        if not grocery_list:
            raise NotFoundError(f"Grocery list not found: {grocery_list_id}")
        return grocery_list

    @staticmethod
    def get_list_for_plan(db: Session, meal_plan_id: UUID) -> GroceryList:
        grocery_list = GroceryListRepository(db).get_for_plan(meal_plan_id)
        if not grocery_list:
            raise NotFoundError(f"No grocery list for meal plan: {meal_plan_id}")
        return grocery_list

    @staticmethod
    def update_item(
        db: Session, grocery_list_id: UUID, item_name: str, changes: GroceryItemUpdate
    ) -> GroceryList:
        grocery_list = GroceryService.get_list(db, grocery_list_id)
        item = GroceryListItemRepository(db).get_by_name(grocery_list_id, item_name)
        if not item:
            raise NotFoundError(f"Item not found in grocery list: {item_name}")

        data = changes.model_dump(exclude_unset=True)
        try:
            for key, value in data.items():
                setattr(item, key, value)
            if "estimated_price" in data:
                grocery_list.total_cost = round(
                    sum(float(i.estimated_price or 0) for i in grocery_list.items), 2
                )
            db.commit()
            db.refresh(grocery_list)
        except Exception:
            db.rollback()
            logger.exception(f"grocery_item_update_failed list_id={grocery_list_id}")
            raise
        return grocery_list

    @staticmethod
    def delete_list(db: Session, grocery_list_id: UUID) -> bool:
        grocery_list = GroceryService.get_list(db, grocery_list_id)
        plan = MealPlanRepository(db).get_by_id(grocery_list.meal_plan_id) if grocery_list.meal_plan_id else None
        try:
            if plan is not None and plan.grocery_list_id == grocery_list_id:
                plan.grocery_list_id = None
            db.delete(grocery_list)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"grocery_list_delete_failed list_id={grocery_list_id}")
            raise
        return True
