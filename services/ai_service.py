"""
AI meal planning through the OpenAI proxy.

Requests are rate limited with a sliding one-minute window, retried on
transient failures and cached for ``ai_cache_ttl_sec``. When
``use_mock_ai`` is set every call is answered by ``MockMealGenerator``.
"""

from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple
import json
import logging
import re
import time

from adapters import openai_proxy_adapter
from app.config import settings
from app.exceptions import ExternalServiceError, RateLimitError
from domain.schemas.household_schemas import HouseholdPreferences
from domain.schemas.plan_schemas import MealDraft, MealPlanDraft
from services.budget_service import BudgetService
from services.mock_ai import MockMealGenerator

logger = logging.getLogger("mealplanner.ai")

PLAN_MODEL = "gpt-4"
SWAP_MODEL = "gpt-3.5-turbo"

SYSTEM_PROMPT = """
You are a professional meal planning assistant that creates personalized weekly meal plans based on user preferences, dietary restrictions, and budget constraints.

Your meal plans are:
1. Nutritionally balanced and varied
2. Respectful of all dietary restrictions
3. Budget-conscious and cost-effective
4. Appropriate for the user's cooking skill level
5. Realistic for the user's available cooking time
6. Designed to minimize food waste by reusing ingredients across meals

Always respond with properly formatted JSON.
""".strip()

SWAP_SYSTEM_PROMPT = (
    "You are a meal planning assistant that suggests alternative recipes based on user "
    "preferences. You provide creative, delicious alternatives that match dietary "
    "restrictions and budget constraints."
)
CHEF_SYSTEM_PROMPT = (
    "You are a professional chef providing clear, step-by-step cooking instructions. "
    "Your instructions are concise, practical, and easy to follow."
)
TIPS_SYSTEM_PROMPT = (
    "You are a helpful cooking assistant providing personalized tips to make cooking "
    "easier and more enjoyable."
)

_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

_clock = time.monotonic
_sleep = time.sleep
_request_times: Deque[float] = deque()
_cache: Dict[str, Tuple[float, Any]] = {}
mock_generator = MockMealGenerator()


def reset_state():
    """Forget rate-limit history and cached responses"""
    _request_times.clear()
    _cache.clear()


def recipe_id_for(name: str) -> str:
    return "recipe_" + re.sub(r"\s+", "_", name.strip().lower())


def _snake_keys(value):
    if isinstance(value, dict):
        return {_CAMEL_RE.sub("_", k).lower(): _snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_snake_keys(v) for v in value]
    return value


def extract_json_object(content: str) -> dict:
    match = _OBJECT_RE.search(content or "")
    if not match:
        raise ExternalServiceError("No JSON found in AI response", service="openai")
    try:
        return _snake_keys(json.loads(match.group(0)))
    except json.JSONDecodeError as exc:
        raise ExternalServiceError(
            "The AI returned an invalid format", service="openai"
        ) from exc


def extract_json_array(content: str) -> List[str]:
    match = _ARRAY_RE.search(content or "")
    if not match:
        raise ExternalServiceError("No JSON array found in AI response", service="openai")
    try:
        return [str(item) for item in json.loads(match.group(0))]
    except json.JSONDecodeError as exc:
        raise ExternalServiceError(
            "The AI returned an invalid format", service="openai"
        ) from exc


def _attr(obj, key, default=None):
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _text(value) -> str:
    return str(getattr(value, "value", value))


def _ingredient_lines(meal) -> List[str]:
    lines = []
    for ing in _attr(meal, "ingredients") or []:
        lines.append(f"- {_attr(ing, 'amount')} {_attr(ing, 'unit')} {_attr(ing, 'name')}")
    return lines


def _ingredient_names(meal, limit: int = 5) -> str:
    return ", ".join(_attr(i, "name") for i in (_attr(meal, "ingredients") or [])[:limit])


def _combined_restrictions(profile, household: Optional[HouseholdPreferences]) -> List[str]:
    combined = list(profile.dietary_restrictions or [])
    if household:
        for value in household.all_dietary_restrictions:
            if value not in combined:
                combined.append(value)
    return combined


def build_meal_plan_prompt(
    profile,
    weekly_budget: float,
    household: Optional[HouseholdPreferences] = None,
    pantry_items: Optional[List[str]] = None,
    exclude_recipes: Optional[List[str]] = None,
    preferred_cuisines: Optional[List[str]] = None,
) -> str:
    pantry_items = pantry_items or []
    exclude_recipes = exclude_recipes or []
    restrictions = _combined_restrictions(profile, household)
    allergens = household.all_allergens if household else []
    disliked = household.all_disliked_ingredients if household else []
    requirements = household.nutrition_requirements if household else []

    if household and household.cuisine_preferences:
        ranked = sorted(household.cuisine_preferences.items(), key=lambda kv: -kv[1])
        cuisine_info = ", ".join(f"{c} ({n} people like it)" for c, n in ranked)
    else:
        cuisines = preferred_cuisines or profile.cuisine_preferences or []
        cuisine_info = ", ".join(cuisines) or "Any"

    weekday = profile.weekday_cooking_minutes
    weekend = profile.weekend_cooking_minutes
    size = profile.household_size

    lines = [
        "Create a 7-day meal plan with the following requirements:",
        "",
        "User Profile:",
        f"- Household size: {size} people",
        f"- Dietary restrictions: {', '.join(restrictions) or 'None'}",
    ]
    if allergens:
        lines.append(f"- ALLERGENS (MUST AVOID): {', '.join(allergens)}")
    if disliked:
        lines.append(f"- Disliked ingredients (avoid when possible): {', '.join(disliked)}")
    lines += [
        f"- Cuisine preferences: {cuisine_info}",
        f"- Cooking skill level: {_text(profile.cooking_skill_level)}",
        f"- Weekly budget: ${weekly_budget:.2f} (about ${weekly_budget / 7:.2f} per day)",
        f"- Cooking time preference: {weekday} min weekdays, {weekend} min weekends",
    ]
    if requirements:
        lines += ["", "NUTRITION REQUIREMENTS (IMPORTANT):"]
        for req in requirements:
            text = f"- {req.name}: "
            if req.daily_calories:
                text += f"{req.daily_calories} calories/day"
            if req.macros:
                text += (
                    f" ({req.macros.protein}g protein, {req.macros.carbs}g carbs, "
                    f"{req.macros.fat}g fat"
                )
                if req.macros.fiber:
                    text += f", {req.macros.fiber}g fiber"
                text += ")"
            lines.append(text)
    if pantry_items:
        lines += ["", f"Available pantry items to use: {', '.join(pantry_items)}"]
    if exclude_recipes:
        lines.append(f"Exclude these recipes: {', '.join(exclude_recipes)}")

    guidelines = [
        "CRITICAL: Absolutely NO meals should contain any of the listed allergens",
        "Create meals that respect ALL dietary restrictions",
        "Avoid disliked ingredients when possible, but they are not as critical as allergens",
        f"Stay within the weekly budget of ${weekly_budget:.2f}",
        f"Weekday meals should take no more than {weekday} minutes to prepare",
        f"Weekend meals can be more elaborate (up to {weekend} minutes)",
        "Include a variety of cuisines with emphasis on the household's preferences",
        f"Create a balanced plan with appropriate portion sizes for {size} people",
        "Reuse ingredients across meals when possible to reduce waste",
        "Adjust complexity based on the user's cooking skill level",
    ]
    if requirements:
        guidelines += [
            "IMPORTANT: Ensure meals meet the specified nutrition requirements for each household member",
            "Consider portion sizes and nutritional content to help members reach their daily targets",
        ]
    lines += ["", "Planning Guidelines:"]
    lines += [f"{n}. {g}" for n, g in enumerate(guidelines, start=1)]

    lines += [
        "",
        "Please provide a JSON response with 21 meals (7 days x 3 meals) in this exact format:",
        json.dumps(
            {
                "meals": [
                    {
                        "day_of_week": 0,
                        "meal_type": "breakfast",
                        "recipe_name": "Recipe Name",
                        "description": "Brief description",
                        "prep_time": 15,
                        "cook_time": 10,
                        "servings": size,
                        "estimated_cost": 8.50,
                        "ingredients": [
                            {
                                "name": "ingredient name",
                                "amount": 2,
                                "unit": "cups",
                                "category": "produce",
                                "estimated_price": 3.00,
                            }
                        ],
                    }
                ]
            },
            indent=2,
        ),
        "",
        "day_of_week counts from 0 (the first day of the plan) to 6. "
        "Ensure the total estimated cost stays within the budget and all meals "
        "respect dietary restrictions.",
    ]
    return "\n".join(lines)


def build_meal_swap_prompt(
    meal, profile, exclude: List[str], household: Optional[HouseholdPreferences] = None
) -> str:
    restrictions = _combined_restrictions(profile, household)
    cost = float(_attr(meal, "estimated_cost") or 0)
    meal_type = _text(_attr(meal, "meal_type"))
    lines = [
        f'Suggest an alternative {meal_type} recipe to replace "{_attr(meal, "recipe_name")}".',
        "",
        "Original Recipe:",
        f"- Name: {_attr(meal, 'recipe_name')}",
        f"- Description: {_attr(meal, 'description') or ''}",
        f"- Prep time: {_attr(meal, 'prep_time')} minutes",
        f"- Cook time: {_attr(meal, 'cook_time')} minutes",
        f"- Estimated cost: ${cost:.2f}",
        f"- Main ingredients: {_ingredient_names(meal)}",
        "",
        "Requirements:",
        f"- Similar meal type: {meal_type}",
        f"- Dietary restrictions: {', '.join(restrictions) or 'None'}",
    ]
    if household and household.all_allergens:
        lines.append(f"- ALLERGENS (MUST AVOID): {', '.join(household.all_allergens)}")
    if household and household.all_disliked_ingredients:
        lines.append(
            f"- Disliked ingredients (avoid when possible): {', '.join(household.all_disliked_ingredients)}"
        )
    lines += [
        f"- Cuisine preferences: {', '.join(profile.cuisine_preferences or []) or 'Any'}",
        f"- Cooking skill level: {_text(profile.cooking_skill_level)}",
        f"- Target cost: around ${cost:.2f}",
        f"- Servings: {profile.household_size}",
        f"- Maximum prep time: {profile.weekday_cooking_minutes} minutes",
        "",
        f"Do not suggest: {', '.join(exclude)}",
        "",
        "Provide a JSON response with the keys recipe_name, description, prep_time, "
        "cook_time, estimated_cost and ingredients (name, amount, unit, category, "
        "estimated_price).",
    ]
    return "\n".join(lines)


class AIService:
    @staticmethod
    def _check_rate_limit():
        now = _clock()
        while _request_times and now - _request_times[0] >= 60:
            _request_times.popleft()
        if len(_request_times) >= settings.ai_rate_limit_per_minute:
            retry_after = max(60 - (now - _request_times[0]), 0)
            raise RateLimitError(
                "You have reached the rate limit. Please try again in a minute.",
                retry_after=round(retry_after, 1),
            )
        _request_times.append(now)

    @staticmethod
    def _cached(key: str):
        entry = _cache.get(key)
        if entry is None:
            return None
        if _clock() - entry[0] > settings.ai_cache_ttl_sec:
            del _cache[key]
            return None
        return entry[1]

    @staticmethod
    def _store(key: str, value):
        _cache[key] = (_clock(), value)

    @staticmethod
    def request_completion(
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Send one chat completion, retrying transient failures with linear backoff"""
        AIService._check_rate_limit()
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        attempt = 0
        while True:
            try:
                return openai_proxy_adapter.chat_completion(payload)
            except ExternalServiceError as exc:
                retryable = bool((exc.details or {}).get("retryable"))
                if not retryable or attempt >= settings.ai_max_retries:
                    logger.error(f"ai_request_failed model={model} attempts={attempt + 1} error={exc}")
                    raise
                attempt += 1
                logger.warning(
                    f"ai_request_retry model={model} attempt={attempt}/{settings.ai_max_retries}"
                )
                _sleep(settings.ai_retry_delay_sec * attempt)

    @staticmethod
    def generate_meal_plan(
        profile,
        household: Optional[HouseholdPreferences] = None,
        pantry_items: Optional[List[str]] = None,
        exclude_recipes: Optional[List[str]] = None,
        preferred_cuisines: Optional[List[str]] = None,
        weekly_budget: Optional[float] = None,
    ) -> MealPlanDraft:
        budget = float(weekly_budget if weekly_budget is not None else profile.weekly_budget)

        if settings.use_mock_ai:
            restrictions = _combined_restrictions(profile, household)
            logger.info("Using mock AI generator for meal plan")
            return mock_generator.generate_meal_plan(
                restrictions, budget, profile.cooking_skill_level, profile.household_size
            )

        prompt = build_meal_plan_prompt(
            profile, budget, household, pantry_items, exclude_recipes, preferred_cuisines
        )
        cache_key = f"mealplan:{prompt}"
        cached = AIService._cached(cache_key)
        if cached is not None:
            logger.info("Using cached meal plan")
            return cached

        content = AIService.request_completion(
            PLAN_MODEL, SYSTEM_PROMPT, prompt, temperature=0.7, max_tokens=3000
        )
        parsed = extract_json_object(content)
        try:
            meals = [
                MealDraft(**{**meal, "recipe_id": recipe_id_for(meal["recipe_name"])})
                for meal in parsed.get("meals", [])
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalServiceError(
                "Failed to parse meal plan response. The AI returned an invalid format.",
                service="openai",
            ) from exc

        total = round(sum(m.estimated_cost for m in meals), 2)
        result = MealPlanDraft(
            meals=meals,
            total_estimated_cost=total,
            budget_status=BudgetService.calculate_budget_status(total, budget),
        )
        AIService._store(cache_key, result)
        return result

    @staticmethod
    def suggest_meal_swap(
        meal: MealDraft,
        profile,
        exclude: Optional[List[str]] = None,
        household: Optional[HouseholdPreferences] = None,
    ) -> MealDraft:
        exclude = exclude or []
        if settings.use_mock_ai:
            return mock_generator.suggest_meal_swap(meal, float(profile.weekly_budget), exclude)

        cache_key = f"mealswap:{meal.recipe_name}:{meal.day_of_week}:{json.dumps(sorted(exclude))}"
        cached = AIService._cached(cache_key)
        if cached is not None:
            return cached

        content = AIService.request_completion(
            SWAP_MODEL,
            SWAP_SYSTEM_PROMPT,
            build_meal_swap_prompt(meal, profile, exclude, household),
            temperature=0.8,
            max_tokens=800,
        )
        parsed = extract_json_object(content)
        try:
            swapped = MealDraft(
                **{
                    **parsed,
                    "day_of_week": meal.day_of_week,
                    "meal_type": meal.meal_type,
                    "servings": meal.servings,
                    "recipe_id": recipe_id_for(parsed["recipe_name"]),
                }
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalServiceError(
                "Failed to parse meal swap response. The AI returned an invalid format.",
                service="openai",
            ) from exc
        AIService._store(cache_key, swapped)
        return swapped

    @staticmethod
    def get_meal_instructions(meal: MealDraft) -> List[str]:
        if settings.use_mock_ai:
            return mock_generator.instructions(meal)

        cache_key = f"recipe:{meal.recipe_id or meal.recipe_name}"
        cached = AIService._cached(cache_key)
        if cached is not None:
            return cached

        prompt = "\n".join(
            [
                f'Please provide detailed cooking instructions for "{meal.recipe_name}".',
                "",
                "Recipe details:",
                f"- Description: {meal.description or ''}",
                f"- Preparation time: {meal.prep_time} minutes",
                f"- Cooking time: {meal.cook_time} minutes",
                f"- Servings: {meal.servings}",
                "",
                "Ingredients:",
                *_ingredient_lines(meal),
                "",
                "Provide step-by-step instructions as a JSON array of strings.",
            ]
        )
        content = AIService.request_completion(
            SWAP_MODEL, CHEF_SYSTEM_PROMPT, prompt, temperature=0.7, max_tokens=1000
        )
        steps = extract_json_array(content)
        AIService._store(cache_key, steps)
        return steps

    @staticmethod
    def get_cooking_tips(meal: MealDraft, profile) -> List[str]:
        skill = _text(profile.cooking_skill_level)
        if settings.use_mock_ai:
            return mock_generator.cooking_tips(skill)

        prompt = "\n".join(
            [
                f'Please provide 3-5 helpful cooking tips for "{meal.recipe_name}" tailored to a {skill} cook.',
                "",
                f"- Preparation time: {meal.prep_time} minutes",
                f"- Cooking time: {meal.cook_time} minutes",
                f"- Main ingredients: {_ingredient_names(meal)}",
                f"Available cooking time: {profile.weekday_cooking_minutes} minutes on weekdays, "
                f"{profile.weekend_cooking_minutes} minutes on weekends",
                "",
                "Provide tips as a JSON array of strings.",
            ]
        )
        content = AIService.request_completion(
            SWAP_MODEL, TIPS_SYSTEM_PROMPT, prompt, temperature=0.7, max_tokens=800
        )
        return extract_json_array(content)
