"""Meal feedback routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.models import get_db_session
from domain.schemas.feedback_schemas import (
    FeedbackStats,
    MealFeedbackCreate,
    MealFeedbackResponse,
    RecipePreference,
)
from services.feedback_service import FeedbackService

router = APIRouter(prefix="/feedback", tags=["Feedback"])
logger = logging.getLogger("mealplanner.api.feedback")


@router.post("", response_model=MealFeedbackResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(body: MealFeedbackCreate, db: Session = Depends(get_db_session)):
    return MealFeedbackResponse.model_validate(FeedbackService.submit_feedback(db, body))


@router.get("", response_model=List[MealFeedbackResponse])
def list_feedback(
    user_id: UUID = Query(...),
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db_session),
):
    entries = FeedbackService.list_user_feedback(db, user_id, limit)
    return [MealFeedbackResponse.model_validate(f) for f in entries]


@router.get("/meals/{meal_id}", response_model=Optional[MealFeedbackResponse])
def get_meal_feedback(
    meal_id: UUID, user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    """Latest feedback for a meal, or null"""
    entry = FeedbackService.get_meal_feedback(db, user_id, meal_id)
    return MealFeedbackResponse.model_validate(entry) if entry else None


@router.get("/preferences", response_model=List[RecipePreference])
def get_recipe_preferences(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return FeedbackService.get_preferences(db, user_id)


@router.get("/stats", response_model=FeedbackStats)
def get_feedback_stats(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return FeedbackService.get_stats(db, user_id)
