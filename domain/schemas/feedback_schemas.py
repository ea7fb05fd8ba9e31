from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import FeedbackRating


class MealFeedbackCreate(BaseModel):
    user_id: UUID
    meal_plan_id: Optional[UUID] = None
    meal_id: Optional[UUID] = None
    recipe_name: str = Field(..., min_length=1, max_length=200)
    rating: FeedbackRating
    reasons: List[str] = []
    comment: Optional[str] = Field(None, max_length=2000)


class MealFeedbackResponse(BaseModel):
    feedback_id: UUID
    user_id: UUID
    meal_plan_id: Optional[UUID] = None
    meal_id: Optional[UUID] = None
    recipe_name: str
    rating: FeedbackRating
    reasons: List[str] = []
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RecipePreference(BaseModel):
    recipe_name: str
    average_score: float
    count: int


class ReasonCount(BaseModel):
    reason: str
    count: int


class FeedbackStats(BaseModel):
    total: int
    positive: int
    negative: int
    top_reasons: List[ReasonCount]
    recent: List[MealFeedbackResponse]
