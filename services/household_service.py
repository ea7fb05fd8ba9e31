"""
Household member management and the preference aggregation used for planning.
"""

from typing import Dict, List
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from domain.models import HouseholdMember, FoodPreferenceFeedback
from domain.schemas.household_schemas import (
    HouseholdMemberCreate,
    HouseholdMemberUpdate,
    MemberFeedbackCreate,
    HouseholdPreferences,
    NutritionRequirement,
)
from repositories import (
    UserRepository,
    HouseholdMemberRepository,
    MemberFeedbackRepository,
)
from app.exceptions import NotFoundError

logger = logging.getLogger("mealplanner.household")


def _member_columns(data: dict) -> dict:
    """Translate schema field names to ORM attribute names"""
    if "relationship" in data:
        data["relationship_type"] = data.pop("relationship")
    return data


class HouseholdService:
    @staticmethod
    def add_member(
        db: Session, user_id: UUID, data: HouseholdMemberCreate
    ) -> HouseholdMember:
        if not UserRepository(db).exists(user_id):
            raise NotFoundError(f"User not found: {user_id}")

        values = _member_columns(data.model_dump(exclude_none=True))
        member = HouseholdMember(user_id=user_id, **values)
        try:
            member = HouseholdMemberRepository(db).create(member)
        except Exception:
            db.rollback()
            logger.exception(f"member_add_failed user_id={user_id}")
            raise
        logger.info(f"member_added user_id={user_id} member_id={member.member_id}")
        return member

    @staticmethod
    def list_members(db: Session, user_id: UUID) -> List[HouseholdMember]:
        return HouseholdMemberRepository(db).get_by_user_id(user_id)

    @staticmethod
    def get_member(db: Session, member_id: UUID) -> HouseholdMember:
        member = HouseholdMemberRepository(db).get_by_id(member_id)
        if not member:
            raise NotFoundError(f"Household member not found: {member_id}")
        return member

    @staticmethod
    def update_member(
        db: Session, member_id: UUID, changes: HouseholdMemberUpdate
    ) -> HouseholdMember:
        repo = HouseholdMemberRepository(db)
        member = repo.get_by_id(member_id)
        if not member:
            raise NotFoundError(f"Household member not found: {member_id}")

        data = _member_columns(changes.model_dump(exclude_unset=True))
        try:
            member = repo.apply_changes(member, data)
        except Exception:
            db.rollback()
            logger.exception(f"member_update_failed member_id={member_id}")
            raise
        logger.info(f"member_updated member_id={member_id} fields={sorted(data.keys())}")
        return member

    @staticmethod
    def delete_member(db: Session, member_id: UUID) -> bool:
        deleted = HouseholdMemberRepository(db).delete(member_id)
        if not deleted:
            raise NotFoundError(f"Household member not found: {member_id}")
        logger.info(f"member_deleted member_id={member_id}")
        return True

    @staticmethod
    def add_feedback(
        db: Session, member_id: UUID, data: MemberFeedbackCreate
    ) -> FoodPreferenceFeedback:
        if not HouseholdMemberRepository(db).exists(member_id):
            raise NotFoundError(f"Household member not found: {member_id}")
        feedback = FoodPreferenceFeedback(member_id=member_id, **data.model_dump())
        try:
            feedback = MemberFeedbackRepository(db).create(feedback)
        except Exception:
            db.rollback()
            logger.exception(f"member_feedback_failed member_id={member_id}")
            raise
        return feedback

    @staticmethod
    def list_feedback(db: Session, member_id: UUID) -> List[FoodPreferenceFeedback]:
        return MemberFeedbackRepository(db).get_by_member_id(member_id)

    @staticmethod
    def aggregate_preferences(members: List[HouseholdMember]) -> HouseholdPreferences:
        """Union every member's constraints, preserving first-seen order."""
        restrictions: List[str] = []
        allergens: List[str] = []
        disliked: List[str] = []
        cuisines: Dict[str, int] = {}
        requirements: List[NutritionRequirement] = []

        for member in members:
            for value in member.dietary_restrictions or []:
                if value not in restrictions:
                    restrictions.append(value)
            for value in member.allergens or []:
                if value not in allergens:
                    allergens.append(value)
            for value in member.disliked_ingredients or []:
                if value not in disliked:
                    disliked.append(value)
            for cuisine in member.cuisine_preferences or []:
                cuisines[cuisine] = cuisines.get(cuisine, 0) + 1

            nutrition = member.advanced_nutrition or {}
            if nutrition.get("enabled"):
                requirements.append(
                    NutritionRequirement(
                        name=member.name,
                        daily_calories=nutrition.get("daily_calories"),
                        macros=nutrition.get("macros"),
                    )
                )

        return HouseholdPreferences(
            all_dietary_restrictions=restrictions,
            all_allergens=allergens,
            all_disliked_ingredients=disliked,
            cuisine_preferences=cuisines,
            nutrition_requirements=requirements,
        )

    @staticmethod
    def get_household_preferences(db: Session, user_id: UUID) -> HouseholdPreferences:
        members = HouseholdMemberRepository(db).get_by_user_id(user_id)
        return HouseholdService.aggregate_preferences(members)
