"""Instacart shoppable page routes"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.models import get_db_session
from domain.schemas.instacart_schemas import (
    InstacartLinkResponse,
    MealPlanPageRequest,
    RecipePageRequest,
    Retailer,
    ShoppingListPageRequest,
)
from services.grocery_service import GroceryService
from services.instacart_service import get_instacart_service
from services.meal_plan_service import MealPlanService

router = APIRouter(prefix="/instacart", tags=["Instacart"])
logger = logging.getLogger("mealplanner.api.instacart")


@router.post("/recipe", response_model=InstacartLinkResponse)
def create_recipe_page(body: RecipePageRequest):
    return get_instacart_service().create_recipe_page(body)


@router.post("/shopping-list", response_model=InstacartLinkResponse)
def create_shopping_list_page(body: ShoppingListPageRequest):
    return get_instacart_service().create_shopping_list_page(body)


@router.post("/meal-plan", response_model=InstacartLinkResponse)
def create_meal_plan_page(body: MealPlanPageRequest, db: Session = Depends(get_db_session)):
    """One shopping list page with every ingredient in the plan"""
    plan = MealPlanService.get_plan(db, body.meal_plan_id)
    return get_instacart_service().create_meal_plan_shopping_list(plan, body.retailer_key)


@router.post("/grocery-lists/{list_id}", response_model=InstacartLinkResponse)
def create_grocery_list_page(
    list_id: UUID,
    retailer_key: Optional[str] = Query(None),
    db: Session = Depends(get_db_session),
):
    grocery_list = GroceryService.get_list(db, list_id)
    return get_instacart_service().create_grocery_list_page(grocery_list, retailer_key)


@router.get("/retailers", response_model=List[Retailer])
def get_nearby_retailers(
    postal_code: str = Query(..., min_length=3),
    country_code: str = Query("US", min_length=2, max_length=2),
):
    return get_instacart_service().get_nearby_retailers(postal_code, country_code)
