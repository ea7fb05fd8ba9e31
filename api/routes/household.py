"""Household member routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from domain.models import get_db_session
from domain.schemas.household_schemas import (
    HouseholdMemberCreate,
    HouseholdMemberUpdate,
    HouseholdMemberResponse,
    HouseholdPreferences,
    MemberFeedbackCreate,
    MemberFeedbackResponse,
)
from services.household_service import HouseholdService
from domain.mappers import HouseholdMemberMapper

router = APIRouter(prefix="/household", tags=["Household"])
logger = logging.getLogger("mealplanner.api.household")


@router.get("/members", response_model=List[HouseholdMemberResponse])
def list_members(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    members = HouseholdService.list_members(db, user_id)
    return [HouseholdMemberMapper.to_response(m) for m in members]


@router.post(
    "/members",
    response_model=HouseholdMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    member: HouseholdMemberCreate,
    user_id: UUID = Query(...),
    db: Session = Depends(get_db_session),
):
    created = HouseholdService.add_member(db, user_id, member)
    return HouseholdMemberMapper.to_response(created)


@router.get("/members/{member_id}", response_model=HouseholdMemberResponse)
def get_member(member_id: UUID, db: Session = Depends(get_db_session)):
    return HouseholdMemberMapper.to_response(HouseholdService.get_member(db, member_id))


@router.patch("/members/{member_id}", response_model=HouseholdMemberResponse)
def update_member(
    member_id: UUID, changes: HouseholdMemberUpdate, db: Session = Depends(get_db_session)
):
    member = HouseholdService.update_member(db, member_id, changes)
    return HouseholdMemberMapper.to_response(member)


@router.delete("/members/{member_id}")
def delete_member(member_id: UUID, db: Session = Depends(get_db_session)):
    HouseholdService.delete_member(db, member_id)
    return {"status": "ok", "removed": str(member_id)}


@router.post(
    "/members/{member_id}/feedback",
    response_model=MemberFeedbackResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_member_feedback(
    member_id: UUID, feedback: MemberFeedbackCreate, db: Session = Depends(get_db_session)
):
    """Record how one household member felt about a recipe"""
    entry = HouseholdService.add_feedback(db, member_id, feedback)
    return MemberFeedbackResponse.model_validate(entry)


@router.get("/members/{member_id}/feedback", response_model=List[MemberFeedbackResponse])
def list_member_feedback(member_id: UUID, db: Session = Depends(get_db_session)):
    entries = HouseholdService.list_feedback(db, member_id)
    return [MemberFeedbackResponse.model_validate(f) for f in entries]


@router.get("/preferences", response_model=HouseholdPreferences)
def get_household_preferences(
    user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    """Restrictions, allergens and dislikes merged across enabled members"""
    return HouseholdService.get_household_preferences(db, user_id)
