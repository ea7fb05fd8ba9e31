from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import AppUser
from domain.schemas.user_schemas import ProfileUpdateRequest
from repositories import UserRepository
from app.exceptions import NotFoundError

logger = logging.getLogger("mealplanner.profile")


class ProfileService:
    """Business logic for user accounts and the household planning profile"""

    @staticmethod
    def create_user(db: Session, email: str, display_name: Optional[str] = None) -> AppUser:
        """Create new user; duplicate emails raise ServiceValidationError"""
        user_repo = UserRepository(db)
        user = user_repo.create_user(email, display_name)
        logger.info(f"user_created user_id={user.user_id} email={user.email}")
        return user

    @staticmethod
    def get_user(db: Session, user_id: UUID) -> AppUser:
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            logger.warning(f"profile_not_found user_id={user_id}")
            raise NotFoundError(f"User not found: {user_id}")
        return user

    @staticmethod
    def list_users(db: Session) -> List[AppUser]:
        """Return all users (no pagination)."""
        return UserRepository(db).list_users()

    @staticmethod
    def update_profile(
        db: Session, user_id: UUID, changes: ProfileUpdateRequest
    ) -> AppUser:
        """Apply a partial profile update. Only fields present in the request change."""
        user_repo = UserRepository(db)
        user = user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")

        data = changes.model_dump(exclude_unset=True)
        try:
            user = user_repo.apply_changes(user, data)
        except Exception:
            db.rollback()
            logger.exception(f"profile_update_failed user_id={user_id}")
            raise

        logger.info(
            f"profile_updated user_id={user_id} fields={sorted(data.keys())} "
            f"onboarding_completed={user.onboarding_completed}"
        )
        return user

    @staticmethod
    def delete_user(db: Session, user_id: UUID) -> bool:
        """Delete a user; owned records go with it through ORM cascades"""
        user_repo = UserRepository(db)
        user = user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        try:
            db.delete(user)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"user_delete_failed user_id={user_id}")
            raise
        logger.info(f"user_deleted user_id={user_id}")
        return True
