"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.household_repository import (
    HouseholdMemberRepository,
    MemberFeedbackRepository,
)
from repositories.pantry_repository import PantryRepository
from repositories.meal_plan_repository import MealPlanRepository, MealEntryRepository
from repositories.grocery_repository import (
    GroceryListRepository,
    GroceryListItemRepository,
)
from repositories.feedback_repository import MealFeedbackRepository
from repositories.calendar_repository import CalendarEventRepository
from repositories.preferences_repository import (
    AddressRepository,
    PaymentMethodRepository,
    PreferenceSettingsRepository,
)
from repositories.order_repository import OrderRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "HouseholdMemberRepository",
    "MemberFeedbackRepository",
    "PantryRepository",
    "MealPlanRepository",
    "MealEntryRepository",
    "GroceryListRepository",
    "GroceryListItemRepository",
    "MealFeedbackRepository",
    "CalendarEventRepository",
    "AddressRepository",
    "PaymentMethodRepository",
    "PreferenceSettingsRepository",
    "OrderRepository",
]
