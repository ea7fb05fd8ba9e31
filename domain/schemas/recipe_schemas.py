from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from domain.schemas.plan_schemas import Ingredient


class RecipeNutrition(BaseModel):
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    fiber: int = 0
    sugar: int = 0
    sodium: int = 0


class Recipe(BaseModel):
    id: str
    title: str
    summary: str = ""
    image: Optional[str] = None
    ready_in_minutes: int = 0
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 1
    cuisines: List[str] = []
    diets: List[str] = []
    dish_types: List[str] = []
    ingredients: List[Ingredient] = []
    instructions: List[str] = []
    nutrition: Optional[RecipeNutrition] = None
    price_per_serving: float = 0
    estimated_cost: float = 0
    difficulty: str = "medium"
    source_url: Optional[str] = None


class RecipeSearchResponse(BaseModel):
    query: Optional[str] = None
    results: List[Recipe]
    count: int
