"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.user_mapper import UserMapper, HouseholdMemberMapper
from domain.mappers.plan_mapper import MealPlanMapper, GroceryListMapper

__all__ = ["UserMapper", "HouseholdMemberMapper", "MealPlanMapper", "GroceryListMapper"]
