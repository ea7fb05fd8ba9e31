from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID

from domain.constants import GROCERY_CATEGORIES, DEFAULT_CATEGORY


def _validate_category(v):
    if v is None:
        return v
    for category in GROCERY_CATEGORIES:
        if category.lower() == v.strip().lower():
            return category
    raise ValueError(f"Unknown category '{v}'")


class PantryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    quantity: str = Field(default="1", min_length=1, max_length=50)
    category: str = DEFAULT_CATEGORY
    purchase_date: Optional[date] = None
    expiration_date: Optional[date] = None

    @field_validator("name")
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Item name is required")
        return v

    @field_validator("category")
    def known_category(cls, v):
        return _validate_category(v)


class PantryItemCreateRequest(BaseModel):
    """Wrapper for POST /pantry to include the target user_id in the request body."""

    user_id: UUID
    item: PantryItemCreate


class PantryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    quantity: Optional[str] = Field(None, min_length=1, max_length=50)
    category: Optional[str] = None
    purchase_date: Optional[date] = None
    expiration_date: Optional[date] = None

    @field_validator("category")
    def known_category(cls, v):
        return _validate_category(v)


class CommonItemsRequest(BaseModel):
    user_id: UUID
    names: List[str] = Field(..., min_length=1)


class PantryItemResponse(BaseModel):
    pantry_item_id: UUID
    user_id: UUID
    name: str
    quantity: str
    category: str
    purchase_date: Optional[date] = None
    expiration_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PantryCheckResponse(BaseModel):
    name: str
    in_pantry: bool
    item: Optional[PantryItemResponse] = None
