"""Pantry management routes"""

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import Dict, List

from domain.models import get_db_session
from domain.schemas.pantry_schemas import (
    PantryItemResponse,
    PantryItemCreateRequest,
    PantryItemUpdate,
    CommonItemsRequest,
    PantryCheckResponse,
)
from services.pantry_service import PantryService

router = APIRouter(prefix="/pantry", tags=["Pantry"])
logger = logging.getLogger("mealplanner.api.pantry")


@router.get("", response_model=List[PantryItemResponse])
def get_pantry(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    """Get all pantry items for a user"""
    items = PantryService.list_items(db, user_id)
    return [PantryItemResponse.model_validate(i) for i in items]


@router.post("", response_model=PantryItemResponse, status_code=status.HTTP_201_CREATED)
def add_pantry_item(
    payload: PantryItemCreateRequest, db: Session = Depends(get_db_session)
):
    """Add a single pantry item for user (provide user_id in request body)."""
    item = PantryService.add_item(db, payload.user_id, payload.item)
    return PantryItemResponse.model_validate(item)


@router.post(
    "/common",
    response_model=List[PantryItemResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_common_items(payload: CommonItemsRequest, db: Session = Depends(get_db_session)):
    """Bulk-add staples such as salt, oil and rice"""
    items = PantryService.add_common_items(db, payload.user_id, payload.names)
    return [PantryItemResponse.model_validate(i) for i in items]


@router.get("/expiring", response_model=List[PantryItemResponse])
def get_expiring_items(
    user_id: UUID = Query(...),
    days: int = Query(7, ge=0, le=365),
    db: Session = Depends(get_db_session),
):
    items = PantryService.get_expiring_items(db, user_id, days)
    return [PantryItemResponse.model_validate(i) for i in items]


@router.get("/by-category", response_model=Dict[str, List[PantryItemResponse]])
def get_items_by_category(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    grouped = PantryService.get_items_by_category(db, user_id)
    return {
        category: [PantryItemResponse.model_validate(i) for i in items]
        for category, items in grouped.items()
    }


@router.get("/check", response_model=PantryCheckResponse)
def check_item(
    user_id: UUID = Query(...),
    name: str = Query(..., min_length=1),
    db: Session = Depends(get_db_session),
):
    item = PantryService.check_item_in_pantry(db, user_id, name)
    return PantryCheckResponse(
        name=name,
        in_pantry=item is not None,
        item=PantryItemResponse.model_validate(item) if item else None,
    )


@router.patch("/{pantry_item_id}", response_model=PantryItemResponse)
def update_pantry_item(
    pantry_item_id: UUID,
    changes: PantryItemUpdate,
    db: Session = Depends(get_db_session),
):
    item = PantryService.update_item(db, pantry_item_id, changes)
    return PantryItemResponse.model_validate(item)


@router.delete("/{pantry_item_id}")
def delete_pantry_item(pantry_item_id: UUID, db: Session = Depends(get_db_session)):
    """Delete a specific pantry item"""
    PantryService.delete_item(db, pantry_item_id)
    return {"status": "ok", "removed": str(pantry_item_id)}
