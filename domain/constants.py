"""
Shared domain constants: grocery categories, profile defaults
and per-user limits.
"""

GROCERY_CATEGORIES = [
    "Produce",
    "Meat & Seafood",
    "Dairy & Eggs",
    "Pantry",
    "Frozen",
    "Bakery",
    "Beverages",
    "Snacks",
    "Other",
]

DEFAULT_CATEGORY = "Other"

DEFAULT_WEEKLY_BUDGET = 150
DEFAULT_HOUSEHOLD_SIZE = 4

MAX_MEAL_SWAPS_PER_WEEK = 5
MAX_GROCERY_LIST_ITEMS = 100
MAX_PANTRY_ITEMS = 200

DAYS_PER_PLAN = 7
PLANNED_MEAL_TYPES = ("breakfast", "lunch", "dinner")
