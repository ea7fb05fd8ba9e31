"""
Recipe routes - Spoonacular-backed recipe search and retrieval.
Searches return an empty result instead of failing when the recipe API is
unavailable.
"""

from fastapi import APIRouter, Query
from typing import Optional, List
import logging

from domain.schemas.recipe_schemas import Recipe, RecipeSearchResponse
from services.recipe_service import RecipeService
from app.exceptions import NotFoundError

router = APIRouter(prefix="/recipes", tags=["Recipes"])
logger = logging.getLogger("mealplanner.api.recipes")


@router.get("", response_model=RecipeSearchResponse)
def search_recipes_endpoint(
    q: Optional[str] = Query(default=None, description="Free-text recipe query"),
    cuisine: Optional[str] = Query(default=None, description="Cuisine filter"),
    diet: Optional[str] = Query(default=None, description="Diet filter, e.g. vegetarian"),
    intolerances: Optional[List[str]] = Query(default=None, description="Intolerances to avoid"),
    max_ready_time: Optional[int] = Query(default=None, ge=1, description="Maximum minutes"),
    limit: int = Query(default=10, ge=1, le=100, description="Maximum results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
):
    """
    Search recipes with filters.

    - **q**: Search query
    - **cuisine** / **diet** / **intolerances**: Spoonacular filters
    - **max_ready_time**: Total time limit in minutes
    - **limit** / **offset**: Pagination
    """
    results = RecipeService.search_recipes(
        query=q,
        cuisine=cuisine,
        diet=diet,
        intolerances=intolerances,
        max_ready_time=max_ready_time,
        number=limit,
        offset=offset,
    )
    return RecipeSearchResponse(query=q, results=results, count=len(results))


@router.get("/random", response_model=List[Recipe])
def random_recipes(
    number: int = Query(default=5, ge=1, le=20),
    tags: Optional[List[str]] = Query(default=None),
):
    return RecipeService.get_random_recipes(number, tags)


@router.get("/{recipe_id}", response_model=Recipe)
def get_recipe(recipe_id: str):
    """Get full recipe details by ID"""
    recipe = RecipeService.get_recipe(recipe_id)
    if recipe is None:
        raise NotFoundError(f"Recipe not found: {recipe_id}")
    return recipe
