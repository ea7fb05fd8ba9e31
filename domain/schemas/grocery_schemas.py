from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import BudgetStatus


class GroceryItemResponse(BaseModel):
    item_id: UUID
    name: str
    quantity: str
    category: str
    estimated_price: float
    is_in_pantry: bool = False
    pantry_quantity: Optional[str] = None
    checked: bool = False

    model_config = {"from_attributes": True}


class BudgetComparison(BaseModel):
    budget: float
    difference: float
    status: BudgetStatus


class CostSavingSwap(BaseModel):
    original_item: str
    suggested_item: str
    savings: float
    reason: str


class GroceryListResponse(BaseModel):
    grocery_list_id: UUID
    user_id: UUID
    meal_plan_id: Optional[UUID] = None
    items: List[GroceryItemResponse]
    total_cost: float
    budget_comparison: Optional[BudgetComparison] = None
    suggested_swaps: List[CostSavingSwap] = []
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GenerateGroceryListRequest(BaseModel):
    meal_plan_id: UUID
    include_pantry: bool = True


class GroceryItemUpdate(BaseModel):
    quantity: Optional[str] = Field(None, min_length=1, max_length=50)
    estimated_price: Optional[float] = Field(None, ge=0)
    checked: Optional[bool] = None
