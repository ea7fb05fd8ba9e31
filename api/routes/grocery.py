"""Grocery list routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from domain.models import get_db_session
from domain.mappers import GroceryListMapper
from domain.schemas.grocery_schemas import (
    GenerateGroceryListRequest,
    GroceryItemUpdate,
    GroceryListResponse,
)
from services.grocery_service import GroceryService

router = APIRouter(prefix="/grocery-lists", tags=["Grocery"])
logger = logging.getLogger("mealplanner.api.grocery")


@router.post("", response_model=GroceryListResponse, status_code=status.HTTP_201_CREATED)
def generate_grocery_list(
    body: GenerateGroceryListRequest, db: Session = Depends(get_db_session)
):
    """Build (or rebuild) the grocery list for a meal plan"""
    grocery_list = GroceryService.generate_from_plan(
        db, body.meal_plan_id, include_pantry=body.include_pantry
    )
    return GroceryListMapper.to_response(grocery_list)


@router.get("/by-plan/{plan_id}", response_model=GroceryListResponse)
def get_list_for_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    return GroceryListMapper.to_response(GroceryService.get_list_for_plan(db, plan_id))


@router.get("/{list_id}", response_model=GroceryListResponse)
def get_grocery_list(list_id: UUID, db: Session = Depends(get_db_session)):
    return GroceryListMapper.to_response(GroceryService.get_list(db, list_id))


@router.patch("/{list_id}/items/{item_name}", response_model=GroceryListResponse)
def update_grocery_item(
    list_id: UUID,
    item_name: str,
    changes: GroceryItemUpdate,
    db: Session = Depends(get_db_session),
):
    """Update one line, e.g. check it off while shopping"""
    grocery_list = GroceryService.update_item(db, list_id, item_name, changes)
    return GroceryListMapper.to_response(grocery_list)


@router.delete("/{list_id}")
def delete_grocery_list(list_id: UUID, db: Session = Depends(get_db_session)):
    GroceryService.delete_list(db, list_id)
    return {"status": "ok", "removed": str(list_id)}
