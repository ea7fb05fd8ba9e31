"""
Tests for AI meal planning.

This test suite covers:
- Pulling JSON out of chat replies and normalizing camelCase keys
- The sliding one-minute request window
- Retrying transient proxy failures with linear backoff
- Parsing and caching generated plans and swaps when the mock generator is off
"""

import json

import pytest

from test_fixtures import make_meal, make_user
from adapters import openai_proxy_adapter
from domain.enums import BudgetStatus, MealType
from services import ai_service
from services.ai_service import (
    AIService,
    extract_json_array,
    extract_json_object,
    recipe_id_for,
)
from app.exceptions import ExternalServiceError, RateLimitError

PLAN_REPLY = "Here is your plan:\n" + json.dumps(
    {
        "meals": [
            {
                "dayOfWeek": 0,
                "mealType": "dinner",
                "recipeName": "Lentil Soup",
                "prepTime": 10,
                "cookTime": 30,
                "estimatedCost": 9.5,
                "ingredients": [
                    {"name": "lentils", "amount": 2, "unit": "cups",
                     "category": "pantry", "estimatedPrice": 3.0}
                ],
            },
            {
                "dayOfWeek": 1,
                "mealType": "breakfast",
                "recipeName": "Overnight Oats",
                "prepTime": 5,
                "cookTime": 0,
                "estimatedCost": 6.25,
            },
        ]
    }
) + "\nEnjoy!"


def _retryable(status_code=503):
    return ExternalServiceError(
        "AI proxy returned HTTP 503",
        service="openai",
        details={"retryable": True, "status_code": status_code},
    )


@pytest.fixture
def live_ai(monkeypatch):
    """Turn off the mock generator; yields the list of payloads sent to the proxy"""
    monkeypatch.setattr(ai_service.settings, "use_mock_ai", False)
    sent = []
    replies = []

    def fake_completion(payload):
        sent.append(payload)
        return replies.pop(0)

    monkeypatch.setattr(openai_proxy_adapter, "chat_completion", fake_completion)
    return sent, replies


# =============================================================================
# JSON EXTRACTION
# =============================================================================


def test_extract_json_object_converts_camel_case():
    parsed = extract_json_object('Sure! {"recipeName": "Tacos", "ingredients": [{"estimatedPrice": 2}]}')

    assert parsed == {"recipe_name": "Tacos", "ingredients": [{"estimated_price": 2}]}


def test_extract_json_errors():
    with pytest.raises(ExternalServiceError):
        extract_json_object("no json here")
    with pytest.raises(ExternalServiceError):
        extract_json_object("{not: valid}")
    with pytest.raises(ExternalServiceError):
        extract_json_array("steps: none")


def test_extract_json_array_and_recipe_id():
    assert extract_json_array('Steps:\n["Chop onions", "Fry"]') == ["Chop onions", "Fry"]
    assert recipe_id_for("  Lentil   Soup ") == "recipe_lentil_soup"


# =============================================================================
# RATE LIMIT AND RETRIES
# =============================================================================


def test_rate_limit_window(monkeypatch):
    """
    Verifies:
    - ten requests fit in one minute
    - the eleventh raises RateLimitError with the seconds until a slot frees
    - requests are allowed again once the window slides past
    """
    now = [500.0]
    monkeypatch.setattr(ai_service, "_clock", lambda: now[0])

    for _ in range(10):
        AIService._check_rate_limit()

    now[0] += 15
    with pytest.raises(RateLimitError) as exc_info:
        AIService._check_rate_limit()
    assert exc_info.value.retry_after == 45.0

    now[0] += 46
    AIService._check_rate_limit()


def test_retries_transient_failures_with_linear_backoff(monkeypatch):
    sleeps = []
    outcomes = [_retryable(), _retryable(429), "done"]

    def flaky(payload):
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(ai_service, "_sleep", sleeps.append)
    monkeypatch.setattr(openai_proxy_adapter, "chat_completion", flaky)

    assert AIService.request_completion("gpt-4", "system", "user") == "done"
    assert sleeps == [1.0, 2.0]


def test_gives_up_after_max_retries(monkeypatch):
    sleeps = []
    calls = []

    def always_down(payload):
        calls.append(payload)
        raise _retryable()

    monkeypatch.setattr(ai_service, "_sleep", sleeps.append)
    monkeypatch.setattr(openai_proxy_adapter, "chat_completion", always_down)

    with pytest.raises(ExternalServiceError):
        AIService.request_completion("gpt-4", "system", "user")
    assert len(calls) == 4
    assert sleeps == [1.0, 2.0, 3.0]


def test_non_retryable_failure_raises_immediately(monkeypatch):
    sleeps = []

    def rejected(payload):
        raise ExternalServiceError(
            "AI proxy returned HTTP 400",
            service="openai",
            details={"retryable": False, "status_code": 400},
        )

    monkeypatch.setattr(ai_service, "_sleep", sleeps.append)
    monkeypatch.setattr(openai_proxy_adapter, "chat_completion", rejected)

    with pytest.raises(ExternalServiceError):
        AIService.request_completion("gpt-4", "system", "user")
    assert sleeps == []


# =============================================================================
# GENERATION
# =============================================================================


def test_mock_generator_is_used_by_default():
    draft = AIService.generate_meal_plan(make_user(weekly_budget=150.0))

    assert len(draft.meals) == 21


def test_generated_plan_is_parsed_and_cached(live_ai):
    sent, replies = live_ai
    replies.append(PLAN_REPLY)
    user = make_user(weekly_budget=150.0, dietary_restrictions=["vegetarian"])

    draft = AIService.generate_meal_plan(user)
    again = AIService.generate_meal_plan(user)

    assert len(sent) == 1
    assert again == draft
    assert [m.recipe_name for m in draft.meals] == ["Lentil Soup", "Overnight Oats"]
    assert draft.meals[0].meal_type == MealType.DINNER
    assert draft.meals[0].recipe_id == "recipe_lentil_soup"
    assert draft.meals[0].ingredients[0].estimated_price == 3.0
    assert draft.total_estimated_cost == 15.75
    assert draft.budget_status == BudgetStatus.UNDER

    payload = sent[0]
    assert payload["model"] == ai_service.PLAN_MODEL
    assert payload["max_tokens"] == 3000
    prompt = payload["messages"][1]["content"]
    assert "Dietary restrictions: vegetarian" in prompt
    assert "Weekly budget: $150.00" in prompt


def test_generated_plan_with_bad_meals_raises(live_ai):
    sent, replies = live_ai
    replies.append('{"meals": [{"mealType": "dinner"}]}')

    with pytest.raises(ExternalServiceError) as exc_info:
        AIService.generate_meal_plan(make_user())
    assert "invalid format" in str(exc_info.value)


def test_swap_keeps_slot_of_original_meal(live_ai):
    sent, replies = live_ai
    replies.append('{"recipeName": "Veggie Curry", "prepTime": 15, "cookTime": 25, "estimatedCost": 11}')
    meal = make_meal("Steak Frites", MealType.DINNER, day_of_week=4, servings=3)

    swapped = AIService.suggest_meal_swap(meal, make_user(), exclude=["Steak Frites"])

    assert swapped.recipe_name == "Veggie Curry"
    assert swapped.day_of_week == 4
    assert swapped.meal_type == MealType.DINNER
    assert swapped.servings == 3
    assert swapped.recipe_id == "recipe_veggie_curry"
    assert "Do not suggest: Steak Frites" in sent[0]["messages"][1]["content"]


def test_instructions_come_back_as_steps(live_ai):
    sent, replies = live_ai
    replies.append('["Rinse lentils", "Simmer 30 minutes"]')

    steps = AIService.get_meal_instructions(make_meal("Lentil Soup"))

    assert steps == ["Rinse lentils", "Simmer 30 minutes"]
    assert "- 1.5 lb chicken breast" in sent[0]["messages"][1]["content"]
