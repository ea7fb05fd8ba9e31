"""
Shared test fixtures and utilities for the MealPlanner test suite.

This module contains common mock objects, helper functions, and test client setup
that are reused across multiple test files to ensure consistency and reduce duplication.
"""

import uuid
from types import SimpleNamespace
from datetime import datetime, date
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from domain.enums import CookingSkillLevel, MealType
from domain.models import SessionLocal, init_database, drop_database
from domain.schemas.plan_schemas import Ingredient, MealDraft
from domain.schemas.user_schemas import ProfileUpdateRequest
from services.profile_service import ProfileService
from main import app

# The lifespan (schema creation, adapter clients) only runs inside ``with TestClient(...)``;
# tests that need tables use the db_session fixture instead.
client = TestClient(app)


# Helper function to generate unique emails
def unique_email(prefix: str = "test") -> str:
    """Generate unique email address using UUID to avoid conflicts"""
    return f"{prefix}-{uuid.uuid4()}@example.com"


# Realistic default household profiles
REALISTIC_USERS = {
    "default": {"display_name": "Sarah Martinez", "email_prefix": "sarah.martinez"},
    "vegetarian": {"display_name": "Raj Patel", "email_prefix": "raj.patel"},
    "budget": {"display_name": "Emma Johnson", "email_prefix": "emma.johnson"},
}


def make_user(
    user_id=None,
    email=None,
    display_name=None,
    profile_type="default",
    household_size=4,
    weekly_budget=150.0,
    dietary_restrictions=None,
    cooking_skill_level=CookingSkillLevel.INTERMEDIATE,
):
    """
    Create a mock user object for testing with realistic data.

    Args:
        user_id: Optional UUID for the user. Generates new UUID if not provided.
        email: User's email address. Auto-generates if not provided.
        display_name: Display name. Uses realistic default if not provided.
        profile_type: Type of profile (default, vegetarian, budget).
        household_size: People cooked for.
        weekly_budget: Weekly grocery budget in dollars.
        dietary_restrictions: Diet list. Defaults to none.
        cooking_skill_level: Skill level enum.

    Returns:
        SimpleNamespace: Mock user with the attributes routes, mappers and the
        AI prompt builders read.

    Example:
        >>> user = make_user(weekly_budget=90)
        >>> user.weekly_budget
        90
    """
    profile = REALISTIC_USERS.get(profile_type, REALISTIC_USERS["default"])
    now = datetime.utcnow()

    return SimpleNamespace(
        user_id=user_id or uuid.uuid4(),
        email=email or unique_email(profile["email_prefix"]),
        display_name=display_name or profile["display_name"],
        household_size=household_size,
        dietary_restrictions=list(dietary_restrictions or []),
        cuisine_preferences=[],
        cooking_skill_level=cooking_skill_level,
        weekly_budget=weekly_budget,
        weekday_cooking_minutes=30,
        weekend_cooking_minutes=60,
        goals=[],
        onboarding_completed=True,
        created_at=now,
        updated_at=now,
    )


def make_meal(
    recipe_name="Grilled Chicken with Vegetables",
    meal_type=MealType.DINNER,
    day_of_week=0,
    estimated_cost=12.0,
    prep_time=10,
    cook_time=20,
    servings=4,
    ingredients=None,
):
    """
    Create a meal draft with realistic ingredients.

    ``ingredients`` is a list of (name, amount, unit, category, price) tuples.
    """
    if ingredients is None:
        ingredients = [
            ("chicken breast", 1.5, "lb", "meat", 8.0),
            ("broccoli", 2, "cups", "produce", 2.5),
        ]
    return MealDraft(
        day_of_week=day_of_week,
        meal_type=meal_type,
        recipe_name=recipe_name,
        prep_time=prep_time,
        cook_time=cook_time,
        servings=servings,
        estimated_cost=estimated_cost,
        ingredients=[
            Ingredient(name=n, amount=a, unit=u, category=c, estimated_price=p)
            for n, a, u, c, p in ingredients
        ],
    )


def create_user(db: Session, profile_type="default", **profile):
    """
    Persist a user and apply any profile fields given (weekly_budget, household_size, ...).
    """
    defaults = REALISTIC_USERS.get(profile_type, REALISTIC_USERS["default"])
    user = ProfileService.create_user(
        db, unique_email(defaults["email_prefix"]), defaults["display_name"]
    )
    if profile:
        user = ProfileService.update_profile(
            db, user.user_id, ProfileUpdateRequest(**profile)
        )
    return user


def next_monday(today: date = None) -> date:
    today = today or date.today()
    return date.fromordinal(today.toordinal() + (7 - today.weekday()))


# =============================================================================
# DATABASE SESSION FIXTURE FOR INTEGRATION TESTS
# =============================================================================


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a database session for integration tests.

    Each test gets a freshly created schema on the shared in-memory SQLite
    engine (the same engine the API routes use), and the schema is dropped
    afterwards to avoid test pollution.

    Yields:
        Session: SQLAlchemy database session
    """
    init_database()
    session = SessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()
        drop_database()
