"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    drop_database,
    get_db_session,
)
from domain.models.user import AppUser
from domain.models.household import HouseholdMember, FoodPreferenceFeedback
from domain.models.pantry import PantryItem
from domain.models.meal_plan import MealPlan, MealEntry
from domain.models.grocery import GroceryList, GroceryListItem
from domain.models.feedback import MealFeedback
from domain.models.calendar import CalendarEvent
from domain.models.preferences import (
    SavedAddress,
    SavedPaymentMethod,
    UserPreferenceSettings,
)
from domain.models.order import ShoppingOrder

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "drop_database",
    "get_db_session",
    # User and household
    "AppUser",
    "HouseholdMember",
    "FoodPreferenceFeedback",
    # Pantry
    "PantryItem",
    # Meal plans
    "MealPlan",
    "MealEntry",
    # Grocery
    "GroceryList",
    "GroceryListItem",
    # Feedback and calendar
    "MealFeedback",
    "CalendarEvent",
    # Preferences and orders
    "SavedAddress",
    "SavedPaymentMethod",
    "UserPreferenceSettings",
    "ShoppingOrder",
]
