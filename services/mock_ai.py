"""
Offline meal generator used when ``use_mock_ai`` is enabled.

A small fixed meal table per diet is varied by day, scaled to the weekly
budget and adjusted for cooking skill. Pass a seeded ``random.Random`` for
reproducible output.
"""

from typing import Dict, List, Optional
import random

from domain.constants import DAYS_PER_PLAN, PLANNED_MEAL_TYPES
from domain.schemas.plan_schemas import MealDraft, MealPlanDraft
from services.budget_service import BudgetService


def _meal(meal_type, name, description, prep, cook, cost, recipe_id, ingredients):
    return {
        "meal_type": meal_type,
        "recipe_name": name,
        "description": description,
        "prep_time": prep,
        "cook_time": cook,
        "servings": 4,
        "estimated_cost": cost,
        "recipe_id": recipe_id,
        "ingredients": [
            {"name": n, "amount": a, "unit": u, "category": c, "estimated_price": p}
            for n, a, u, c, p in ingredients
        ],
    }


MEAL_DATABASE: Dict[str, List[dict]] = {
    "regular": [
        _meal(
            "breakfast",
            "Scrambled Eggs with Toast",
            "Fluffy scrambled eggs with whole wheat toast and fresh fruit",
            10, 10, 8.50, "recipe_scrambled_eggs",
            [
                ("Eggs", 8, "large", "dairy", 3.00),
                ("Whole wheat bread", 8, "slices", "grains", 2.50),
                ("Butter", 2, "tbsp", "dairy", 0.50),
                ("Mixed berries", 2, "cups", "produce", 2.50),
            ],
        ),
        _meal(
            "lunch",
            "Chicken Caesar Salad",
            "Classic Caesar salad with grilled chicken breast",
            15, 20, 14.00, "recipe_chicken_caesar",
            [
                ("Chicken breast", 1.5, "lbs", "meat", 7.00),
                ("Romaine lettuce", 2, "heads", "produce", 3.00),
                ("Caesar dressing", 1, "cup", "condiments", 2.00),
                ("Parmesan cheese", 0.5, "cup", "dairy", 2.00),
            ],
        ),
        _meal(
            "dinner",
            "Spaghetti Bolognese",
            "Traditional Italian pasta with meat sauce",
            20, 40, 16.00, "recipe_spaghetti_bolognese",
            [
                ("Ground beef", 1, "lb", "meat", 6.00),
                ("Spaghetti", 1, "lb", "grains", 2.00),
                ("Tomato sauce", 24, "oz", "canned", 3.00),
                ("Onion", 1, "large", "produce", 1.00),
                ("Garlic", 4, "cloves", "produce", 0.50),
            ],
        ),
    ],
    "vegetarian": [
        _meal(
            "breakfast",
            "Vegetable Omelette",
            "Fluffy omelette with mushrooms, peppers, and cheese",
            10, 15, 9.00, "recipe_veg_omelette",
            [
                ("Eggs", 8, "large", "dairy", 3.00),
                ("Bell peppers", 2, "medium", "produce", 2.00),
                ("Mushrooms", 8, "oz", "produce", 2.50),
                ("Cheddar cheese", 1, "cup", "dairy", 1.50),
            ],
        ),
        _meal(
            "lunch",
            "Caprese Sandwich",
            "Fresh mozzarella, tomato, and basil on ciabatta",
            10, 5, 12.00, "recipe_caprese_sandwich",
            [
                ("Fresh mozzarella", 1, "lb", "dairy", 5.00),
                ("Tomatoes", 3, "large", "produce", 2.50),
                ("Fresh basil", 1, "bunch", "produce", 2.00),
                ("Ciabatta bread", 4, "rolls", "grains", 2.50),
            ],
        ),
        _meal(
            "dinner",
            "Mushroom Risotto",
            "Creamy Italian rice with wild mushrooms",
            15, 30, 14.00, "recipe_mushroom_risotto",
            [
                ("Arborio rice", 2, "cups", "grains", 4.00),
                ("Mixed mushrooms", 1, "lb", "produce", 5.00),
                ("Vegetable broth", 6, "cups", "canned", 3.00),
                ("Parmesan cheese", 1, "cup", "dairy", 2.00),
            ],
        ),
    ],
    "vegan": [
        _meal(
            "breakfast",
            "Avocado Toast with Chickpeas",
            "Whole grain toast topped with mashed avocado and spiced chickpeas",
            10, 5, 8.00, "recipe_avocado_toast",
            [
                ("Avocados", 4, "medium", "produce", 4.00),
                ("Whole grain bread", 8, "slices", "grains", 2.50),
                ("Chickpeas", 1, "can", "canned", 1.50),
            ],
        ),
        _meal(
            "lunch",
            "Buddha Bowl",
            "Quinoa bowl with roasted vegetables and tahini dressing",
            20, 25, 11.00, "recipe_buddha_bowl",
            [
                ("Quinoa", 2, "cups", "grains", 3.00),
                ("Sweet potato", 2, "large", "produce", 2.00),
                ("Broccoli", 1, "head", "produce", 2.50),
                ("Tahini", 0.5, "cup", "condiments", 3.50),
            ],
        ),
        _meal(
            "dinner",
            "Thai Red Curry",
            "Spicy coconut curry with tofu and vegetables",
            20, 25, 13.00, "recipe_thai_curry",
            [
                ("Firm tofu", 1, "lb", "protein", 3.50),
                ("Coconut milk", 2, "cans", "canned", 4.00),
                ("Mixed vegetables", 2, "lbs", "produce", 4.00),
                ("Red curry paste", 3, "tbsp", "condiments", 1.50),
            ],
        ),
    ],
}

SKILL_TIME_MULTIPLIERS = {"beginner": 1.3, "intermediate": 1.0, "advanced": 0.8}

COOKING_TIPS = {
    "beginner": [
        "Prep all ingredients before you start cooking",
        "Read the entire recipe before beginning",
        "Use a timer to avoid overcooking",
        "Taste as you go and adjust seasoning",
        "Clean as you cook to save time later",
    ],
    "intermediate": [
        "Try substituting ingredients based on what you have",
        "Experiment with different herbs and spices",
        "Use high heat for searing, medium for sautéing",
        "Let meat rest after cooking for better flavor",
        "Prep vegetables uniformly for even cooking",
    ],
    "advanced": [
        "Try making your own pasta or bread from scratch",
        "Experiment with different cooking techniques",
        "Create your own spice blends",
        "Try plating techniques for presentation",
        "Consider wine pairings with your meals",
    ],
}


def select_meal_set(restrictions: List[str]) -> str:
    lowered = {r.lower() for r in restrictions or []}
    if "vegan" in lowered:
        return "vegan"
    if "vegetarian" in lowered:
        return "vegetarian"
    return "regular"


def name_variation(base_name: str, day: int) -> str:
    variations = {
        0: base_name,
        1: base_name.replace("with", "and"),
        2: f"Quick {base_name}",
        3: f"Homemade {base_name}",
        4: f"{base_name} Deluxe",
        5: f"Weekend {base_name}",
        6: f"Simple {base_name}",
    }
    return variations.get(day, base_name)


def _skill(value) -> str:
    return getattr(value, "value", value) or "intermediate"


class MockMealGenerator:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def adjust_cost_for_budget(self, base_cost: float, weekly_budget: float) -> float:
        meal_budget = weekly_budget / 7 / 3
        jitter = 0.9 + self.rng.random() * 0.2
        if base_cost > meal_budget * 1.2:
            return round(meal_budget * jitter, 2)
        return round(base_cost * jitter, 2)

    @staticmethod
    def adjust_time_for_skill(base_time: int, skill_level) -> int:
        return round(base_time * SKILL_TIME_MULTIPLIERS.get(_skill(skill_level), 1.0))

    def generate_meal_plan(
        self,
        restrictions: List[str],
        weekly_budget: float,
        skill_level,
        household_size: int = 4,
    ) -> MealPlanDraft:
        base_meals = MEAL_DATABASE[select_meal_set(restrictions)]
        meals: List[MealDraft] = []

        for day in range(DAYS_PER_PLAN):
            for meal_type in PLANNED_MEAL_TYPES:
                base = next((m for m in base_meals if m["meal_type"] == meal_type), base_meals[0])
                meals.append(
                    MealDraft(
                        **{
                            **base,
                            "day_of_week": day,
                            "meal_type": meal_type,
                            "recipe_name": name_variation(base["recipe_name"], day),
                            "estimated_cost": self.adjust_cost_for_budget(
                                base["estimated_cost"], weekly_budget
                            ),
                            "prep_time": self.adjust_time_for_skill(base["prep_time"], skill_level),
                            "cook_time": self.adjust_time_for_skill(base["cook_time"], skill_level),
                        }
                    )
                )

        total = round(sum(m.estimated_cost for m in meals), 2)
        return MealPlanDraft(
            meals=meals,
            total_estimated_cost=total,
            budget_status=BudgetService.calculate_budget_status(total, weekly_budget),
        )

    def suggest_meal_swap(
        self, original: MealDraft, weekly_budget: float, exclude: List[str] = None
    ) -> MealDraft:
        """A different meal of the same type, keeping the original day and servings"""
        exclude = set(exclude or [])
        meal_type = _skill(original.meal_type)
        candidates = [
            m
            for meals in MEAL_DATABASE.values()
            for m in meals
            if m["meal_type"] == meal_type
            and m["recipe_name"] != original.recipe_name
            and m["recipe_name"] not in exclude
        ]
        if not candidates:
            return original

        chosen = self.rng.choice(candidates)
        return MealDraft(
            **{
                **chosen,
                "day_of_week": original.day_of_week,
                "servings": original.servings,
                "estimated_cost": self.adjust_cost_for_budget(
                    chosen["estimated_cost"], weekly_budget
                ),
            }
        )

    @staticmethod
    def cooking_tips(skill_level) -> List[str]:
        return list(COOKING_TIPS.get(_skill(skill_level), COOKING_TIPS["intermediate"]))

    @staticmethod
    def instructions(meal: MealDraft) -> List[str]:
        names = ", ".join(i.name for i in meal.ingredients) or "the ingredients"
        steps = [f"Gather and measure {names}."]
        if meal.prep_time:
            steps.append(f"Prep the ingredients (about {meal.prep_time} minutes).")
        if meal.cook_time:
            steps.append(f"Cook for about {meal.cook_time} minutes, stirring as needed.")
        steps.append(f"Serve {meal.recipe_name} for {meal.servings}.")
        return steps
