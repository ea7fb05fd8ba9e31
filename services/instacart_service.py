"""
Instacart shoppable pages for recipes, shopping lists and meal plans.

``get_instacart_service()`` returns the mock variant when
``use_mock_instacart`` is set; it builds placeholder links and never calls
the API.
"""

from typing import Dict, Iterable, List, Optional
import logging
import re

import httpx

from adapters import instacart_adapter
from app.config import settings
from app.exceptions import ExternalServiceError
from domain.models import GroceryList, MealPlan
from domain.schemas.instacart_schemas import (
    InstacartLineItem,
    InstacartLinkResponse,
    Retailer,
    RecipePageRequest,
    ShoppingListPageRequest,
)
from services.shopping_service import parse_quantity

logger = logging.getLogger("mealplanner.instacart")

RECIPE_PATH = "/idp/v1/products/recipe"
RETAILERS_PATH = "/idp/v1/retailers"
MOCK_BASE_URL = "https://www.instacart.com/store"
AFFILIATE_ID = "meal_planner"

MOCK_RETAILERS = [
    Retailer(retailer_key="whole_foods", name="Whole Foods Market", distance_miles=1.2),
    Retailer(retailer_key="kroger", name="Kroger", distance_miles=2.5),
    Retailer(retailer_key="safeway", name="Safeway", distance_miles=3.0),
]


def display_text(name: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split(" "))


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "list"


def to_line_items(items: Iterable[InstacartLineItem]) -> List[dict]:
    return [
        {
            "name": item.name,
            "display_text": display_text(item.name),
            "measurements": [{"quantity": item.quantity, "unit": item.unit}],
        }
        for item in items
    ]


def add_preferred_retailer(url: str, retailer_key: str) -> str:
    return str(httpx.URL(url).copy_set_param("retailer_key", retailer_key))


def aggregate_plan_items(plan: MealPlan) -> List[InstacartLineItem]:
    """Sum ingredient amounts across the plan, merged by lowercased name"""
    merged: Dict[str, InstacartLineItem] = {}
    for meal in plan.meals:
        for ingredient in meal.ingredients or []:
            key = ingredient["name"].lower()
            amount = float(ingredient.get("amount") or 0)
            if key in merged:
                merged[key].quantity += amount
            else:
                merged[key] = InstacartLineItem(
                    name=ingredient["name"],
                    quantity=amount or 1,
                    unit=ingredient.get("unit") or "each",
                )
    return list(merged.values())


def grocery_list_items(grocery_list: GroceryList) -> List[InstacartLineItem]:
    items = []
    for item in grocery_list.items:
        if item.is_in_pantry:
            continue
        quantity, unit = parse_quantity(item.quantity)
        items.append(InstacartLineItem(name=item.name, quantity=quantity, unit=unit))
    return items


def plan_title(plan: MealPlan) -> str:
    return f"Weekly Meal Plan - {plan.week_start_date.strftime('%m/%d/%Y')}"


class InstacartService:
    mock = False

    def _create_page(self, payload: dict, retailer_key: Optional[str] = None) -> InstacartLinkResponse:
        payload.setdefault("landing_page_configuration", {"enable_pantry_items": True})
        response = instacart_adapter.post(RECIPE_PATH, payload)
        url = response.get("products_link_url")
        if not url:
            raise ExternalServiceError(
                "Instacart response is missing products_link_url", service="instacart"
            )
        if retailer_key:
            url = add_preferred_retailer(url, retailer_key)
        logger.info(f"instacart_page_created link_type={payload['link_type']}")
        return InstacartLinkResponse(products_link_url=url)

    def create_recipe_page(self, request: RecipePageRequest) -> InstacartLinkResponse:
        payload = {
            "title": request.title,
            "link_type": "recipe",
            "ingredients": to_line_items(request.ingredients),
            "instructions": request.instructions,
        }
        if request.image_url:
            payload["image_url"] = request.image_url
        if request.servings:
            payload["servings"] = request.servings
        if request.cooking_time is not None:
            payload["cooking_time"] = request.cooking_time
        return self._create_page(payload, request.retailer_key)

    def create_shopping_list_page(self, request: ShoppingListPageRequest) -> InstacartLinkResponse:
        payload = {
            "title": request.title,
            "link_type": "shopping_list",
            "ingredients": to_line_items(request.items),
        }
        return self._create_page(payload, request.retailer_key)

    def create_meal_plan_shopping_list(
        self, plan: MealPlan, retailer_key: Optional[str] = None
    ) -> InstacartLinkResponse:
        return self.create_shopping_list_page(
            ShoppingListPageRequest(
                title=plan_title(plan),
                items=aggregate_plan_items(plan),
                retailer_key=retailer_key,
            )
        )

    def create_grocery_list_page(
        self, grocery_list: GroceryList, retailer_key: Optional[str] = None
    ) -> InstacartLinkResponse:
        return self.create_shopping_list_page(
            ShoppingListPageRequest(
                title="Grocery Shopping List",
                items=grocery_list_items(grocery_list),
                retailer_key=retailer_key,
            )
        )

    def get_nearby_retailers(self, postal_code: str, country_code: str = "US") -> List[Retailer]:
        data = instacart_adapter.get(
            RETAILERS_PATH, {"postal_code": postal_code, "country_code": country_code}
        )
        return [Retailer.model_validate(r) for r in data.get("retailers", [])]


class MockInstacartService(InstacartService):
    mock = True

    def _create_page(self, payload: dict, retailer_key: Optional[str] = None) -> InstacartLinkResponse:
        section = "recipes" if payload["link_type"] == "recipe" else "shopping-lists"
        url = f"{MOCK_BASE_URL}/{section}/mock-{slugify(payload['title'])}?aff_id={AFFILIATE_ID}"
        if retailer_key:
            url = add_preferred_retailer(url, retailer_key)
        logger.info(f"instacart_mock_page link_type={payload['link_type']}")
        return InstacartLinkResponse(products_link_url=url, mock=True)

    def get_nearby_retailers(self, postal_code: str, country_code: str = "US") -> List[Retailer]:
        return [r.model_copy() for r in MOCK_RETAILERS]


def get_instacart_service() -> InstacartService:
    if settings.use_mock_instacart:
        return MockInstacartService()
    return InstacartService()
