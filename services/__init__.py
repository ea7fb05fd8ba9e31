"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.household_service import HouseholdService
from services.pantry_service import PantryService
from services.recipe_service import RecipeService
from services.budget_service import BudgetService
from services.ai_service import AIService
from services.calendar_service import CalendarService
from services.meal_plan_service import MealPlanService
from services.grocery_service import GroceryService
from services.feedback_service import FeedbackService
from services.preferences_service import PreferencesService
from services.orchestrator_service import OrchestratorService
from services.pricing_service import PricingService
from services.shopping_service import ShoppingService
from services.instacart_service import (
    InstacartService,
    MockInstacartService,
    get_instacart_service,
)

__all__ = [
    "ProfileService",
    "HouseholdService",
    "PantryService",
    "RecipeService",
    "BudgetService",
    "AIService",
    "CalendarService",
    "MealPlanService",
    "GroceryService",
    "FeedbackService",
    "PreferencesService",
    "OrchestratorService",
    "PricingService",
    "ShoppingService",
    "InstacartService",
    "MockInstacartService",
    "get_instacart_service",
]
