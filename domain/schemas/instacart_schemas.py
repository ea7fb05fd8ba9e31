from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class InstacartLineItem(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(default=1, gt=0)
    unit: str = "each"


class RecipePageRequest(BaseModel):
    title: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    servings: Optional[int] = Field(None, ge=1)
    cooking_time: Optional[int] = Field(None, ge=0)
    ingredients: List[InstacartLineItem] = Field(..., min_length=1)
    instructions: List[str] = []
    retailer_key: Optional[str] = None


class ShoppingListPageRequest(BaseModel):
    title: str = Field(..., min_length=1)
    items: List[InstacartLineItem] = Field(..., min_length=1)
    retailer_key: Optional[str] = None


class MealPlanPageRequest(BaseModel):
    meal_plan_id: UUID
    retailer_key: Optional[str] = None


class InstacartLinkResponse(BaseModel):
    products_link_url: str
    mock: bool = False


class Retailer(BaseModel):
    retailer_key: str
    name: str
    retailer_logo_url: Optional[str] = None
    distance_miles: Optional[float] = None
