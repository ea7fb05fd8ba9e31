"""
User domain mappers.
Handles transformation between ORM models and DTOs for user-related entities.
"""

from domain.models import AppUser, HouseholdMember
from domain.schemas.user_schemas import UserProfileResponse, CookingTimePreference
from domain.schemas.household_schemas import (
    HouseholdMemberResponse,
    AdvancedNutrition,
    MealPreferences,
)


class UserMapper:
    """Mapper for user-related transformations."""

    @staticmethod
    def to_response(user: AppUser) -> UserProfileResponse:
        """
        Convert AppUser ORM model to UserProfileResponse DTO.

        The two cooking-minute columns are folded into a single
        ``cooking_time_preference`` object.
        """
        return UserProfileResponse(
            user_id=user.user_id,
            email=user.email,
            display_name=user.display_name,
            household_size=user.household_size,
            dietary_restrictions=user.dietary_restrictions or [],
            cuisine_preferences=user.cuisine_preferences or [],
            cooking_skill_level=user.cooking_skill_level,
            weekly_budget=float(user.weekly_budget),
            cooking_time_preference=CookingTimePreference(
                weekday=user.weekday_cooking_minutes,
                weekend=user.weekend_cooking_minutes,
            ),
            goals=user.goals or [],
            onboarding_completed=bool(user.onboarding_completed),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class HouseholdMemberMapper:
    """Mapper for household member sub-profiles."""

    @staticmethod
    def to_response(member: HouseholdMember) -> HouseholdMemberResponse:
        advanced = None
        if member.advanced_nutrition:
            advanced = AdvancedNutrition.model_validate(member.advanced_nutrition)

        return HouseholdMemberResponse(
            member_id=member.member_id,
            user_id=member.user_id,
            name=member.name,
            age=member.age,
            relationship=member.relationship_type,
            dietary_restrictions=member.dietary_restrictions or [],
            cuisine_preferences=member.cuisine_preferences or [],
            allergens=member.allergens or [],
            disliked_ingredients=member.disliked_ingredients or [],
            favorite_ingredients=member.favorite_ingredients or [],
            meal_preferences=MealPreferences.model_validate(
                member.meal_preferences or {}
            ),
            portion_size=member.portion_size,
            spice_preference=member.spice_preference,
            advanced_nutrition=advanced,
            notes=member.notes,
            created_at=member.created_at,
            updated_at=member.updated_at,
        )
