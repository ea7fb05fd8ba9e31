"""
User Repository - Data access layer for user accounts and profiles
"""

from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import AppUser
from app.exceptions import ServiceValidationError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_email(self, email: str) -> Optional[AppUser]:
        """Get user by email (case-insensitive)"""
        return (
            self.db.query(AppUser)
            .filter(AppUser.email == email.strip().lower())
            .first()
        )

    def create_user(self, email: str, display_name: str = None) -> AppUser:
        """Create a new user"""
        email = email.strip().lower()
        if self.get_by_email(email):
            raise ServiceValidationError(f"User with email {email} already exists")
        user = AppUser(email=email, display_name=display_name)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ServiceValidationError(f"User with email {email} already exists")

    def list_users(self, skip: int = 0, limit: int = 100):
        return (
            self.db.query(AppUser)
            .order_by(AppUser.created_at)
            .offset(skip)
            .limit(limit)
            .all()
        )
