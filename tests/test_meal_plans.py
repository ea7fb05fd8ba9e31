"""
Tests for budget status, weekly plan generation and meal swaps.

This test suite covers:
- Budget status thresholds (under <= 95%, at <= 105%, over beyond)
- Budget analysis breakdowns and savings opportunities
- Generating and persisting a 7x3 plan with the mock AI generator
- Swap limit and swap bookkeeping
- Current-week lookup and deletion
- Listing every plan for a user, newest week first
"""

import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy.orm import Session

from test_fixtures import client, db_session, create_user, make_meal
from domain.constants import MAX_MEAL_SWAPS_PER_WEEK
from domain.enums import BudgetStatus, MealType
from domain.models import MealPlan
from domain.schemas.plan_schemas import GeneratePlanRequest
from repositories import GroceryListRepository
from services.budget_service import BudgetService
from services.grocery_service import GroceryService
from services.meal_plan_service import MealPlanService, default_week_start
from services.mock_ai import MockMealGenerator, name_variation, select_meal_set
from app.exceptions import ConflictError, NotFoundError


# =============================================================================
# BUDGET STATUS
# =============================================================================


@pytest.mark.parametrize(
    "total, budget, expected",
    [
        (95.0, 100.0, BudgetStatus.UNDER),
        (95.5, 100.0, BudgetStatus.AT),
        (105.0, 100.0, BudgetStatus.AT),
        (105.5, 100.0, BudgetStatus.OVER),
        (10.0, 0, BudgetStatus.OVER),
        (0, 0, BudgetStatus.UNDER),
    ],
)
def test_budget_status_thresholds(total, budget, expected):
    assert BudgetService.calculate_budget_status(total, budget) == expected


def test_analyze_budget_breakdowns_and_opportunities():
    """
    Verifies:
    - cost breakdown is keyed by meal type, category breakdown by ingredient category
    - an over-budget plan gets a meal_swap opportunity worth 60% of the overage
    - expensive ingredients get substitution suggestions
    """
    meals = [
        make_meal(meal_type=MealType.DINNER, estimated_cost=60.0),
        make_meal(
            recipe_name="Salmon Bowl",
            meal_type=MealType.LUNCH,
            estimated_cost=50.0,
            ingredients=[("salmon fillet", 1, "lb", "meat", 14.0)],
        ),
    ]
    plan = {"meals": meals, "total_estimated_cost": 110.0}

    analysis = BudgetService.analyze_budget(plan, 100.0, household_size=4)

    assert analysis.budget_status == BudgetStatus.OVER
    assert analysis.budget_percentage == 110
    assert analysis.daily_average == round(110 / 7, 2)
    assert analysis.cost_breakdown["dinner"] == 60.0
    assert analysis.cost_breakdown["lunch"] == 50.0
    assert analysis.category_breakdown["meat"] == 22.0

    types = [o.type for o in analysis.savings_opportunities]
    assert "meal_swap" in types
    swap = next(o for o in analysis.savings_opportunities if o.type == "meal_swap")
    assert swap.potential_savings == 6.0
    salmon = next(o for o in analysis.savings_opportunities if o.ingredient_name == "salmon fillet")
    assert "Tilapia" in salmon.suggestion


# =============================================================================
# MOCK GENERATOR
# =============================================================================


def test_mock_generator_builds_full_week():
    generator = MockMealGenerator()
    draft = generator.generate_meal_plan(["Vegetarian"], 150.0, "beginner")

    assert len(draft.meals) == 21
    assert {m.day_of_week for m in draft.meals} == set(range(7))
    assert draft.total_estimated_cost == round(sum(m.estimated_cost for m in draft.meals), 2)


def test_meal_set_and_name_variations():
    assert select_meal_set(["Vegan", "Vegetarian"]) == "vegan"
    assert select_meal_set(["vegetarian"]) == "vegetarian"
    assert select_meal_set([]) == "regular"
    assert name_variation("Eggs with Toast", 1) == "Eggs and Toast"
    assert name_variation("Eggs with Toast", 2) == "Quick Eggs with Toast"


def test_default_week_start_is_tomorrow():
    assert default_week_start(date(2025, 3, 10)) == date(2025, 3, 11)


# =============================================================================
# PLAN PERSISTENCE (SQLite)
# =============================================================================


def _generate(db, user, week_start=None):
    return MealPlanService.generate_weekly_plan(
        db, GeneratePlanRequest(user_id=user.user_id, week_start=week_start)
    )


def test_generate_weekly_plan_persists_meals(db_session: Session):
    user = create_user(db_session, weekly_budget=150)
    plan = _generate(db_session, user, date(2025, 3, 10))

    assert plan.week_start_date == date(2025, 3, 10)
    assert len(plan.meals) == 21
    assert plan.swap_count == 0
    assert float(plan.weekly_budget) == 150
    total = round(sum(float(m.estimated_cost) for m in plan.meals), 2)
    assert float(plan.total_estimated_cost) == pytest.approx(total)
    assert plan.budget_status == BudgetService.calculate_budget_status(total, 150)


def test_generate_plan_unknown_user(db_session: Session):
    with pytest.raises(NotFoundError):
        MealPlanService.generate_weekly_plan(
            db_session, GeneratePlanRequest(user_id=uuid.uuid4())
        )


def test_swap_meal_replaces_recipe_and_counts(db_session: Session):
    """
    Verifies:
    - the replacement is a different recipe of the same meal type on the same day
    - swap_count increases and the total is recomputed
    """
    user = create_user(db_session)
    plan = _generate(db_session, user)
    original_names = {m.recipe_name for m in plan.meals}
    meal = next(m for m in plan.meals if m.meal_type == MealType.DINNER)
    meal_id, day = meal.meal_id, meal.day_of_week

    swapped = MealPlanService.swap_meal(db_session, plan.meal_plan_id, meal_id)

    entry = next(m for m in swapped.meals if m.meal_id == meal_id)
    assert entry.recipe_name not in original_names
    assert entry.day_of_week == day
    assert entry.meal_type == MealType.DINNER
    assert swapped.swap_count == 1
    assert float(swapped.total_estimated_cost) == pytest.approx(
        round(sum(float(m.estimated_cost) for m in swapped.meals), 2)
    )


def test_swap_limit_raises_conflict(db_session: Session):
    user = create_user(db_session)
    plan = _generate(db_session, user)
    plan.swap_count = MAX_MEAL_SWAPS_PER_WEEK
    db_session.commit()

    with pytest.raises(ConflictError) as exc_info:
        MealPlanService.swap_meal(db_session, plan.meal_plan_id, plan.meals[0].meal_id)
    assert exc_info.value.code == "SWAP_LIMIT_REACHED"


def test_swap_unknown_meal(db_session: Session):
    user = create_user(db_session)
    plan = _generate(db_session, user)

    with pytest.raises(NotFoundError):
        MealPlanService.swap_meal(db_session, plan.meal_plan_id, uuid.uuid4())


def test_current_week_plan_covers_tomorrow(db_session: Session):
    user = create_user(db_session)
    today = date(2025, 3, 10)
    plan = _generate(db_session, user, today - timedelta(days=2))

    found = MealPlanService.get_current_week_plan(db_session, user.user_id, today=today)
    assert found.meal_plan_id == plan.meal_plan_id

    assert MealPlanService.get_current_week_plan(
        db_session, user.user_id, today=today + timedelta(days=14)
    ) is None


def test_delete_plan_removes_grocery_list(db_session: Session):
    user = create_user(db_session)
    plan = _generate(db_session, user)
    grocery_list = GroceryService.generate_from_plan(db_session, plan.meal_plan_id)

    assert MealPlanService.delete_plan(db_session, plan.meal_plan_id) is True
    assert GroceryListRepository(db_session).get_by_id(grocery_list.grocery_list_id) is None
    with pytest.raises(NotFoundError):
        MealPlanService.get_plan(db_session, plan.meal_plan_id)


def test_list_plans_returns_every_week_newest_first(db_session: Session):
    user = create_user(db_session)
    first_week = date(2024, 1, 1)
    db_session.add_all(
        [MealPlan(user_id=user.user_id, week_start_date=first_week + timedelta(weeks=n)) for n in range(25)]
    )
    db_session.commit()

    plans = MealPlanService.list_plans(db_session, user.user_id)

    assert len(plans) == 25
    assert plans[0].week_start_date == first_week + timedelta(weeks=24)
    assert plans[-1].week_start_date == first_week


# =============================================================================
# ROUTES
# =============================================================================


def test_plan_routes(db_session: Session):
    """
    POST /plans, swap through the API, then read the budget analysis.
    """
    user = create_user(db_session, weekly_budget=120)

    r = client.post("/plans", json={"user_id": str(user.user_id), "week_start": "2025-03-10"})
    assert r.status_code == 201
    plan = r.json()
    assert len(plan["meals"]) == 21
    meal_id = plan["meals"][0]["meal_id"]

    r2 = client.post(f"/plans/{plan['meal_plan_id']}/meals/{meal_id}/swap")
    assert r2.status_code == 200
    assert r2.json()["swap_count"] == 1

    r3 = client.get(f"/plans/{plan['meal_plan_id']}/budget")
    assert r3.status_code == 200
    assert r3.json()["weekly_budget"] == 120

    r4 = client.get(f"/plans?user_id={user.user_id}")
    assert [p["meal_plan_id"] for p in r4.json()] == [plan["meal_plan_id"]]


def test_swap_limit_route_returns_conflict(monkeypatch):
    def exhausted(db, plan_id, meal_id):
        raise ConflictError("Maximum of 5 meal swaps per plan reached", code="SWAP_LIMIT_REACHED")

    monkeypatch.setattr(MealPlanService, "swap_meal", exhausted)
    r = client.post(f"/plans/{uuid.uuid4()}/meals/{uuid.uuid4()}/swap")

    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CONFLICT"
    assert r.json()["error"]["reason"] == "SWAP_LIMIT_REACHED"
