"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import (
    UserCreate,
    ProfileUpdateRequest,
    UserProfileResponse,
)
from domain.schemas.household_schemas import (
    HouseholdMemberCreate,
    HouseholdMemberUpdate,
    HouseholdMemberResponse,
    MemberFeedbackCreate,
    MemberFeedbackResponse,
    HouseholdPreferences,
)
from domain.schemas.pantry_schemas import (
    PantryItemCreate,
    PantryItemCreateRequest,
    PantryItemUpdate,
    PantryItemResponse,
)
from domain.schemas.plan_schemas import (
    Ingredient,
    MealDraft,
    MealPlanDraft,
    MealPlanResponse,
    BudgetAnalysisResponse,
)
from domain.schemas.recipe_schemas import Recipe, RecipeNutrition
from domain.schemas.grocery_schemas import GroceryListResponse, CostSavingSwap
from domain.schemas.shopping_schemas import (
    IngredientPrice,
    Store,
    DeliverySlot,
    StoreProduct,
    CartTotals,
)
from domain.schemas.feedback_schemas import MealFeedbackCreate, MealFeedbackResponse
from domain.schemas.calendar_schemas import CalendarEventCreate, CalendarEventResponse

__all__ = [
    # Profile schemas
    "UserCreate",
    "ProfileUpdateRequest",
    "UserProfileResponse",
    # Household schemas
    "HouseholdMemberCreate",
    "HouseholdMemberUpdate",
    "HouseholdMemberResponse",
    "MemberFeedbackCreate",
    "MemberFeedbackResponse",
    "HouseholdPreferences",
    # Pantry schemas
    "PantryItemCreate",
    "PantryItemCreateRequest",
    "PantryItemUpdate",
    "PantryItemResponse",
    # Plan schemas
    "Ingredient",
    "MealDraft",
    "MealPlanDraft",
    "MealPlanResponse",
    "BudgetAnalysisResponse",
    # Recipe schemas
    "Recipe",
    "RecipeNutrition",
    # Grocery and shopping schemas
    "GroceryListResponse",
    "CostSavingSwap",
    "IngredientPrice",
    "Store",
    "DeliverySlot",
    "StoreProduct",
    "CartTotals",
    # Feedback and calendar schemas
    "MealFeedbackCreate",
    "MealFeedbackResponse",
    "CalendarEventCreate",
    "CalendarEventResponse",
]
