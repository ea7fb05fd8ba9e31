"""
Tests for end-to-end plan generation.

This test suite covers:
- Calendar rules applied to generated meals (skips, busy days, name suffixes)
- Freshness ordering of the week
- Budget retries with a tightening target
- Persisting the plan with its grocery list
- Meal instructions falling back to the AI source
"""

import random
from datetime import date
from types import SimpleNamespace

from sqlalchemy.orm import Session

from test_fixtures import client, db_session, create_user, make_meal
from domain.enums import BudgetStatus, CalendarEventType, CookingSkillLevel, MealType
from domain.schemas.calendar_schemas import CalendarEventCreate
from domain.schemas.plan_schemas import CompletePlanRequest, MealPlanDraft
from services.ai_service import AIService
from services.calendar_service import CalendarService
from services.mock_ai import MockMealGenerator
from services.orchestrator_service import (
    OrchestratorService,
    apply_calendar,
    order_by_freshness,
)

WEEK_START = date(2025, 3, 10)


def _event(event_type, day_offset, meal_type=None):
    return SimpleNamespace(
        event_type=event_type,
        date=date.fromordinal(WEEK_START.toordinal() + day_offset),
        meal_type=meal_type,
    )


def _draft(meals, total):
    return MealPlanDraft(meals=meals, total_estimated_cost=total, budget_status=BudgetStatus.UNDER)


# =============================================================================
# PIPELINE STEPS
# =============================================================================


def test_apply_calendar_skips_and_adjusts_meals():
    """
    Verifies:
    - an eating-out dinner is dropped
    - busy days drop meals over 30 minutes and keep quicker ones
    - date night renames the dinner, adults-only cuts servings to 2
    """
    meals = [
        make_meal("Steak Frites", MealType.DINNER, day_of_week=0),
        make_meal("Quick Wrap", MealType.LUNCH, day_of_week=1, prep_time=10, cook_time=20),
        make_meal("Slow Roast", MealType.DINNER, day_of_week=1, prep_time=25, cook_time=90),
        make_meal("Risotto", MealType.DINNER, day_of_week=2),
        make_meal("Pancakes", MealType.BREAKFAST, day_of_week=3),
    ]
    events = [
        _event(CalendarEventType.EATING_OUT, 0, MealType.DINNER),
        _event(CalendarEventType.BUSY_DAY, 1),
        _event(CalendarEventType.DATE_NIGHT, 2, MealType.DINNER),
        _event(CalendarEventType.ADULTS_ONLY, 3),
    ]

    kept = apply_calendar(meals, events, WEEK_START)

    assert [m.recipe_name for m in kept] == [
        "Quick Wrap",
        "Risotto (Date Night Special)",
        "Pancakes",
    ]
    assert kept[2].servings == 2
    assert meals[3].recipe_name == "Risotto"


def test_order_by_freshness_cooks_perishables_first():
    meals = [
        make_meal("Fried Rice", ingredients=[("rice", 2, "cups", "pantry", 1.0)]),
        make_meal("Salmon Bowl", ingredients=[("salmon", 1, "lb", "seafood", 12.0)]),
        make_meal("Chicken Soup", ingredients=[("chicken thighs", 1, "lb", "meat", 6.0)]),
        make_meal("Spinach Salad", ingredients=[("spinach", 4, "cups", "produce", 3.0)]),
    ]

    ordered = order_by_freshness(meals)

    assert [m.recipe_name for m in ordered] == [
        "Salmon Bowl",
        "Chicken Soup",
        "Spinach Salad",
        "Fried Rice",
    ]
    assert [m.day_of_week for m in ordered] == [0, 0, 0, 1]
    assert [m.meal_type for m in ordered] == [
        MealType.BREAKFAST,
        MealType.LUNCH,
        MealType.DINNER,
        MealType.BREAKFAST,
    ]


def test_order_by_freshness_fills_every_slot_once():
    """
    Verifies:
    - a reordered full week still has one breakfast, lunch and dinner per day
    """
    draft = MockMealGenerator(random.Random(1)).generate_meal_plan(
        [], 150.0, CookingSkillLevel.INTERMEDIATE
    )

    ordered = order_by_freshness(draft.meals)

    slots = [(m.day_of_week, m.meal_type) for m in ordered]
    assert len(slots) == 21
    assert len(set(slots)) == 21
    assert {m.meal_type for m in ordered if m.day_of_week == 0} == {
        MealType.BREAKFAST,
        MealType.LUNCH,
        MealType.DINNER,
    }


# =============================================================================
# COMPLETE PLAN (SQLite)
# =============================================================================


def test_complete_plan_retries_until_within_budget(db_session: Session, monkeypatch):
    """
    Verifies:
    - an over-budget draft is regenerated with a 10% tighter target
    - the saved plan keeps the user's real budget
    - calendar skips are applied and the grocery list is built
    """
    user = create_user(db_session, weekly_budget=100)
    CalendarService.create_event(
        db_session,
        CalendarEventCreate(
            user_id=user.user_id,
            title="Birthday dinner out",
            event_type=CalendarEventType.EATING_OUT,
            date=WEEK_START,
            meal_type=MealType.DINNER,
        ),
    )

    budgets = []
    drafts = [
        _draft([make_meal(estimated_cost=150.0)], 150.0),
        _draft(
            [
                make_meal("Chicken Stir Fry", MealType.DINNER, day_of_week=0),
                make_meal("Chicken Salad", MealType.LUNCH, day_of_week=0),
            ],
            24.0,
        ),
    ]

    def fake_generate(profile, household=None, pantry_items=None, exclude_recipes=None,
                      preferred_cuisines=None, weekly_budget=None):
        budgets.append(weekly_budget)
        return drafts[len(budgets) - 1]

    monkeypatch.setattr(AIService, "generate_meal_plan", fake_generate)

    plan = OrchestratorService.generate_complete_plan(
        db_session,
        CompletePlanRequest(user_id=user.user_id, week_start=WEEK_START, optimize_freshness=False),
    )

    assert budgets == [100.0, 90.0]
    assert float(plan.weekly_budget) == 100
    assert [m.recipe_name for m in plan.meals] == ["Chicken Salad"]
    assert plan.budget_status == BudgetStatus.UNDER
    assert plan.grocery_list_id is not None


def test_complete_plan_stops_after_max_retries(db_session: Session, monkeypatch):
    user = create_user(db_session, weekly_budget=100)
    budgets = []

    def always_over(profile, weekly_budget=None, **kwargs):
        budgets.append(weekly_budget)
        return _draft([make_meal(estimated_cost=200.0)], 200.0)

    monkeypatch.setattr(AIService, "generate_meal_plan", always_over)

    plan = OrchestratorService.generate_complete_plan(
        db_session,
        CompletePlanRequest(
            user_id=user.user_id,
            week_start=WEEK_START,
            max_retries=2,
            generate_grocery_list=False,
        ),
    )

    assert budgets == [100.0, 90.0, 81.0]
    assert plan.budget_status == BudgetStatus.OVER
    assert plan.grocery_list_id is None


def test_complete_plan_route_with_mock_generator(db_session: Session):
    user = create_user(db_session, weekly_budget=500)

    r = client.post(
        "/plans/complete",
        json={"user_id": str(user.user_id), "week_start": "2025-03-10"},
    )

    assert r.status_code == 201
    body = r.json()
    assert len(body["meals"]) == 21
    assert body["grocery_list_id"] is not None
    days = [m["day_of_week"] for m in body["meals"]]
    assert days == sorted(days)


def test_meal_instructions_fall_back_to_ai(db_session: Session):
    user = create_user(db_session)
    plan = OrchestratorService.generate_complete_plan(
        db_session,
        CompletePlanRequest(user_id=user.user_id, week_start=WEEK_START, generate_grocery_list=False),
    )
    meal = plan.meals[0]

    result = OrchestratorService.get_meal_instructions(db_session, plan.meal_plan_id, meal.meal_id)

    assert result.source == "ai"
    assert result.recipe_name == meal.recipe_name
    assert result.instructions[-1].startswith(f"Serve {meal.recipe_name}")
    db_session.refresh(meal)
    assert meal.instructions == result.instructions
