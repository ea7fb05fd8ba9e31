"""User profile routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID
from typing import List

from domain.models import get_db_session
from domain.schemas.user_schemas import (
    UserProfileResponse,
    UserCreate,
    ProfileUpdateRequest,
)
from services.profile_service import ProfileService
from domain.mappers import UserMapper

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("mealplanner.api.users")


@router.post(
    "", response_model=UserProfileResponse, status_code=status.HTTP_201_CREATED
)
def create_user(user: UserCreate, db: Session = Depends(get_db_session)):
    """Create a user with default profile settings"""
    new_user = ProfileService.create_user(db, user.email, user.display_name)
    return UserMapper.to_response(new_user)


@router.get("", response_model=List[UserProfileResponse])
def get_all_users(db: Session = Depends(get_db_session)):
    users = ProfileService.list_users(db)
    return [UserMapper.to_response(u) for u in users]


@router.get("/{user_id}", response_model=UserProfileResponse)
def get_user(user_id: UUID, db: Session = Depends(get_db_session)):
    return UserMapper.to_response(ProfileService.get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserProfileResponse)
def update_profile(
    user_id: UUID, changes: ProfileUpdateRequest, db: Session = Depends(get_db_session)
):
    """Partial profile update (onboarding steps send one section at a time)"""
    user = ProfileService.update_profile(db, user_id, changes)
    return UserMapper.to_response(user)


@router.delete("/{user_id}")
def delete_user(user_id: UUID, db: Session = Depends(get_db_session)):
    """Delete a user and all their related data."""
    ProfileService.delete_user(db, user_id)
    return {"status": "ok", "deleted": str(user_id)}
