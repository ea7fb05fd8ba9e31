from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import BudgetStatus, MealType


class Ingredient(BaseModel):
    name: str
    amount: float = 0
    unit: str = ""
    category: str = "other"
    estimated_price: float = 0


class MealDraft(BaseModel):
    """A meal as produced by the AI/mock generator, before it is persisted"""

    day_of_week: int = Field(default=0, ge=0, le=6)
    meal_type: MealType
    recipe_name: str
    description: Optional[str] = None
    prep_time: int = Field(default=0, ge=0)
    cook_time: int = Field(default=0, ge=0)
    servings: int = Field(default=4, ge=1)
    estimated_cost: float = Field(default=0, ge=0)
    ingredients: List[Ingredient] = []
    instructions: List[str] = []
    recipe_id: Optional[str] = None
    image_url: Optional[str] = None
    nutrition: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None


class MealPlanDraft(BaseModel):
    meals: List[MealDraft]
    total_estimated_cost: float
    budget_status: BudgetStatus


class GeneratePlanRequest(BaseModel):
    user_id: UUID
    week_start: Optional[date] = None
    preferred_cuisines: List[str] = []
    exclude_recipes: List[str] = []


class CompletePlanRequest(GeneratePlanRequest):
    optimize_freshness: bool = True
    max_retries: int = Field(default=3, ge=0, le=5)
    generate_grocery_list: bool = True
    include_pantry: bool = True


class MealResponse(MealDraft):
    meal_id: UUID

    model_config = {"from_attributes": True}


class MealPlanResponse(BaseModel):
    meal_plan_id: UUID
    user_id: UUID
    week_start_date: date
    meals: List[MealResponse]
    total_estimated_cost: float
    weekly_budget: Optional[float] = None
    budget_status: BudgetStatus
    swap_count: int = 0
    grocery_list_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MealPlanSummary(BaseModel):
    meal_plan_id: UUID
    week_start_date: date
    total_estimated_cost: float
    budget_status: BudgetStatus
    swap_count: int = 0

    model_config = {"from_attributes": True}


class MealInstructionsResponse(BaseModel):
    meal_id: UUID
    recipe_name: str
    instructions: List[str]
    source: str


class SavingsOpportunity(BaseModel):
    type: str
    description: str
    potential_savings: float
    suggestion: str
    meal_id: Optional[UUID] = None
    ingredient_name: Optional[str] = None


class BudgetAnalysisResponse(BaseModel):
    total_cost: float
    weekly_budget: float
    budget_status: BudgetStatus
    budget_percentage: int
    daily_average: float
    cost_breakdown: Dict[str, float]
    category_breakdown: Dict[str, float]
    savings_opportunities: List[SavingsOpportunity]
