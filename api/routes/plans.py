"""Meal plan routes: generation, swaps, instructions and budget analysis"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from domain.models import get_db_session
from domain.mappers import MealPlanMapper
from domain.schemas.plan_schemas import (
    BudgetAnalysisResponse,
    CompletePlanRequest,
    GeneratePlanRequest,
    MealInstructionsResponse,
    MealPlanResponse,
    MealPlanSummary,
)
from services.meal_plan_service import MealPlanService
from services.orchestrator_service import OrchestratorService
from app.exceptions import NotFoundError

router = APIRouter(prefix="/plans", tags=["Meal Planning"])
logger = logging.getLogger("mealplanner.api.plans")


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
def generate_week_plan(body: GeneratePlanRequest, db: Session = Depends(get_db_session)):
    """
    Generate a weekly meal plan from the user's profile, household and pantry.

    The week starts tomorrow unless ``week_start`` is given.
    """
    logger.info(f"Generating plan for user {body.user_id}: week_start={body.week_start}")
    plan = MealPlanService.generate_weekly_plan(db, body)
    return MealPlanMapper.to_response(plan)


@router.post(
    "/complete", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED
)
def generate_complete_plan(body: CompletePlanRequest, db: Session = Depends(get_db_session)):
    """
    Generate a plan and run the full pipeline.

    1. Regenerates with a tighter budget while the plan is over budget
    2. Applies calendar events (skipped meals, kids/date-night variants, busy days)
    3. Orders meals by ingredient freshness
    4. Enriches meals from the recipe API when enabled
    5. Saves the plan and builds its grocery list
    """
    plan = OrchestratorService.generate_complete_plan(db, body)
    return MealPlanMapper.to_response(plan)


@router.get("", response_model=List[MealPlanSummary])
def list_plans(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    plans = MealPlanService.list_plans(db, user_id)
    return [MealPlanMapper.to_summary(p) for p in plans]


@router.get("/current", response_model=MealPlanResponse)
def get_current_plan(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    """The plan whose week covers tomorrow"""
    plan = MealPlanService.get_current_week_plan(db, user_id)
    if plan is None:
        raise NotFoundError(f"No current meal plan for user {user_id}")
    return MealPlanMapper.to_response(plan)


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    return MealPlanMapper.to_response(MealPlanService.get_plan(db, plan_id))


@router.delete("/{plan_id}")
def delete_plan(plan_id: UUID, db: Session = Depends(get_db_session)):
    MealPlanService.delete_plan(db, plan_id)
    return {"status": "ok", "removed": str(plan_id)}


@router.post("/{plan_id}/meals/{meal_id}/swap", response_model=MealPlanResponse)
def swap_meal(plan_id: UUID, meal_id: UUID, db: Session = Depends(get_db_session)):
    """Replace one meal with a different recipe of the same type (5 swaps per plan)"""
    plan = MealPlanService.swap_meal(db, plan_id, meal_id)
    return MealPlanMapper.to_response(plan)


@router.get(
    "/{plan_id}/meals/{meal_id}/instructions", response_model=MealInstructionsResponse
)
def get_meal_instructions(plan_id: UUID, meal_id: UUID, db: Session = Depends(get_db_session)):
    return OrchestratorService.get_meal_instructions(db, plan_id, meal_id)


@router.get("/{plan_id}/meals/{meal_id}/tips", response_model=List[str])
def get_cooking_tips(plan_id: UUID, meal_id: UUID, db: Session = Depends(get_db_session)):
    return MealPlanService.get_cooking_tips(db, plan_id, meal_id)


@router.get("/{plan_id}/budget", response_model=BudgetAnalysisResponse)
def analyze_budget(plan_id: UUID, db: Session = Depends(get_db_session)):
    return MealPlanService.analyze_budget(db, plan_id)
