"""
Recipe lookup backed by the Spoonacular API.

Upstream failures degrade to empty results: searches return [] and lookups
return None so that planning can fall back to AI-generated content.
"""

from typing import Any, Dict, List, Optional
import html
import logging
import re

from adapters import spoonacular_adapter
from app.exceptions import ExternalServiceError
from domain.schemas.plan_schemas import Ingredient
from domain.schemas.recipe_schemas import Recipe, RecipeNutrition

logger = logging.getLogger("mealplanner.recipes")

AISLE_CATEGORIES = [
    ("produce", "Produce"),
    ("meat", "Meat & Seafood"),
    ("seafood", "Meat & Seafood"),
    ("dairy", "Dairy & Eggs"),
    ("cheese", "Dairy & Eggs"),
    ("bakery", "Bakery"),
    ("bread", "Bakery"),
    ("frozen", "Frozen"),
    ("canned goods", "Pantry"),
    ("pasta and rice", "Pantry"),
    ("baking", "Pantry"),
    ("spices and seasonings", "Pantry"),
    ("beverages", "Beverages"),
    ("snacks", "Snacks"),
]

NUTRIENT_FIELDS = {
    "calories": "calories",
    "protein": "protein",
    "carbohydrates": "carbs",
    "fat": "fat",
    "fiber": "fiber",
    "sugar": "sugar",
    "sodium": "sodium",
}

_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(text: str) -> str:
    return html.unescape(_TAG_RE.sub("", text or "")).replace("\xa0", " ").strip()


def map_aisle_to_category(aisle: str) -> str:
    lowered = (aisle or "").lower()
    for key, category in AISLE_CATEGORIES:
        if key in lowered:
            return category
    return "Other"


def calculate_difficulty(ready_in_minutes: int, steps: int) -> str:
    if ready_in_minutes <= 20 and steps <= 5:
        return "easy"
    if ready_in_minutes >= 60 or steps >= 15:
        return "hard"
    return "medium"


def extract_nutrition(nutrition: Optional[Dict[str, Any]]) -> RecipeNutrition:
    values = {}
    for nutrient in (nutrition or {}).get("nutrients", []):
        field = NUTRIENT_FIELDS.get(str(nutrient.get("name", "")).lower())
        if field:
            values[field] = round(nutrient.get("amount") or 0)
    return RecipeNutrition(**values)


def convert_recipe(raw: Dict[str, Any]) -> Recipe:
    """Convert a Spoonacular recipe payload into a Recipe"""
    ready = raw.get("readyInMinutes") or 30
    servings = raw.get("servings") or 4
    price_per_serving = raw.get("pricePerServing") or 0

    instructions = [
        step["step"]
        for block in raw.get("analyzedInstructions") or []
        for step in block.get("steps") or []
        if step.get("step")
    ]

    ingredients = [
        Ingredient(
            name=ing.get("name", ""),
            amount=ing.get("amount") or 0,
            unit=ing.get("unit") or "",
            category=map_aisle_to_category(ing.get("aisle", "")),
        )
        for ing in raw.get("extendedIngredients") or []
    ]

    return Recipe(
        id=str(raw.get("id")),
        title=raw.get("title", ""),
        summary=strip_html(raw.get("summary", "")),
        image=raw.get("image"),
        ready_in_minutes=ready,
        prep_time=int(ready * 0.3),
        cook_time=int(ready * 0.7),
        servings=servings,
        cuisines=raw.get("cuisines") or [],
        diets=raw.get("diets") or [],
        dish_types=raw.get("dishTypes") or [],
        ingredients=ingredients,
        instructions=instructions or ["No instructions available"],
        nutrition=extract_nutrition(raw.get("nutrition")),
        price_per_serving=price_per_serving,
        estimated_cost=round(price_per_serving * servings / 100, 2),
        difficulty=calculate_difficulty(ready, len(instructions)),
        source_url=raw.get("sourceUrl"),
    )


class RecipeService:
    @staticmethod
    def is_available() -> bool:
        return spoonacular_adapter.is_configured()

    @staticmethod
    def search_recipes(
        query: Optional[str] = None,
        cuisine: Optional[str] = None,
        diet: Optional[str] = None,
        intolerances: Optional[List[str]] = None,
        max_ready_time: Optional[int] = None,
        number: int = 10,
        offset: int = 0,
    ) -> List[Recipe]:
        if not RecipeService.is_available():
            logger.warning("Spoonacular API key not configured; recipe search skipped")
            return []

        params = {
            "query": query,
            "cuisine": cuisine,
            "diet": diet,
            "intolerances": ",".join(intolerances) if intolerances else None,
            "maxReadyTime": max_ready_time,
            "number": number,
            "offset": offset or None,
            "addRecipeInformation": "true",
            "addRecipeNutrition": "true",
            "fillIngredients": "true",
        }
        try:
            data = spoonacular_adapter.get("/complexSearch", params)
        except ExternalServiceError as exc:
            logger.warning(f"recipe_search_failed query={query!r} error={exc}")
            return []
        return [convert_recipe(r) for r in data.get("results", [])]

    @staticmethod
    def get_recipe(recipe_id: str) -> Optional[Recipe]:
        if not RecipeService.is_available():
            logger.warning("Spoonacular API key not configured; recipe lookup skipped")
            return None
        try:
            data = spoonacular_adapter.get(
                f"/{recipe_id}/information", {"includeNutrition": "true"}
            )
        except ExternalServiceError as exc:
            logger.warning(f"recipe_lookup_failed recipe_id={recipe_id} error={exc}")
            return None
        return convert_recipe(data)

    @staticmethod
    def get_random_recipes(number: int = 5, tags: Optional[List[str]] = None) -> List[Recipe]:
        if not RecipeService.is_available():
            logger.warning("Spoonacular API key not configured; random recipes skipped")
            return []
        params = {"number": number, "tags": ",".join(tags) if tags else None}
        try:
            data = spoonacular_adapter.get("/random", params)
        except ExternalServiceError as exc:
            logger.warning(f"random_recipes_failed error={exc}")
            return []
        return [convert_recipe(r) for r in data.get("recipes", [])]
