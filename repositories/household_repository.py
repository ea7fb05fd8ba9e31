"""
Household Repository - Data access for household members and their food feedback
"""

from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import HouseholdMember, FoodPreferenceFeedback


class HouseholdMemberRepository(BaseRepository[HouseholdMember]):
    """Repository for household member data access"""

    def __init__(self, db: Session):
        super().__init__(db, HouseholdMember)

    def get_by_user_id(self, user_id: UUID) -> List[HouseholdMember]:
        """All members of a household, oldest first"""
        return (
            self.db.query(HouseholdMember)
            .filter(HouseholdMember.user_id == user_id)
            .order_by(HouseholdMember.created_at.asc(), HouseholdMember.name.asc())
            .all()
        )


class MemberFeedbackRepository(BaseRepository[FoodPreferenceFeedback]):
    """Repository for per-member recipe feedback"""

    def __init__(self, db: Session):
        super().__init__(db, FoodPreferenceFeedback)

    def get_by_member_id(self, member_id: UUID) -> List[FoodPreferenceFeedback]:
        """Feedback for a member, newest first"""
        return (
            self.db.query(FoodPreferenceFeedback)
            .filter(FoodPreferenceFeedback.member_id == member_id)
            .order_by(FoodPreferenceFeedback.created_at.desc())
            .all()
        )
