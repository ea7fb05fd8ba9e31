"""API routes package"""

from . import (
    calendar,
    feedback,
    grocery,
    health,
    household,
    instacart,
    pantry,
    plans,
    preferences,
    pricing,
    recipes,
    shopping,
    users,
)

__all__ = [
    "calendar",
    "feedback",
    "grocery",
    "health",
    "household",
    "instacart",
    "pantry",
    "plans",
    "preferences",
    "pricing",
    "recipes",
    "shopping",
    "users",
]
