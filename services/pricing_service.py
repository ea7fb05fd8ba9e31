"""
Ingredient pricing from grocery provider APIs.

Providers are tried in order (Kroger, Walmart, Spoonacular, mock stores) and
the first one returning prices wins. Results are cached per ingredient and
zip code for ``price_cache_ttl_sec``.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
import logging
import re
import time

from adapters import kroger_adapter, spoonacular_adapter, walmart_adapter
from app.config import settings
from app.exceptions import ExternalServiceError
from domain.schemas.shopping_schemas import IngredientPrice

logger = logging.getLogger("mealplanner.pricing")

MOCK_BASE_PRICES = {
    "chicken": 7.99,
    "beef": 12.99,
    "salmon": 14.99,
    "broccoli": 2.99,
    "rice": 3.99,
    "pasta": 2.49,
    "milk": 3.99,
    "eggs": 4.99,
    "bread": 2.99,
}
MOCK_DEFAULT_PRICE = 3.99
MOCK_STORES = [("Budget Mart", 0.95), ("City Grocer", 1.0), ("Premium Foods", 1.15)]

CATEGORY_BASE_PRICES = {
    "produce": 2.50,
    "meat": 8.00,
    "dairy": 3.50,
    "pantry": 2.00,
    "frozen": 4.00,
    "bakery": 3.00,
    "beverages": 2.50,
    "snacks": 3.50,
}
DEFAULT_BASE_PRICE = 3.00

CATEGORY_PATTERNS = [
    ("meat", re.compile(r"chicken|beef|pork|fish|salmon|turkey")),
    ("dairy", re.compile(r"milk|cheese|yogurt|butter|egg")),
    ("bakery", re.compile(r"bread|bagel|muffin|roll")),
    ("produce", re.compile(r"lettuce|tomato|carrot|broccoli|fruit|apple|banana")),
    ("frozen", re.compile(r"frozen|ice cream")),
    ("beverages", re.compile(r"soda|juice|water|coffee|tea")),
    ("snacks", re.compile(r"chips|cookie|candy")),
]

UNIT_CONVERSIONS = {
    "lb": {"oz": 16, "kg": 0.453592},
    "oz": {"lb": 0.0625, "g": 28.3495},
    "cup": {"tbsp": 16, "tsp": 48, "ml": 236.588},
    "tbsp": {"tsp": 3, "cup": 0.0625, "ml": 14.7868},
}

# raw provider record: (store name, price, unit)
RawPrice = Tuple[str, float, str]

_clock: Callable[[], float] = time.monotonic
_cache: Dict[str, Tuple[float, List[RawPrice]]] = {}


def clear_cache():
    _cache.clear()


def store_id_for(store_name: str) -> str:
    return re.sub(r"\s+", "_", store_name.lower())


def categorize_ingredient(name: str) -> str:
    lowered = name.lower()
    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return "pantry"


def estimate_price(name: str, quantity: float = 1) -> float:
    return CATEGORY_BASE_PRICES.get(categorize_ingredient(name), DEFAULT_BASE_PRICE) * quantity


def adjust_price_for_quantity(
    price: float, from_unit: str, to_unit: str, quantity: float = 1
) -> float:
    multiplier = quantity
    if from_unit != to_unit:
        multiplier *= UNIT_CONVERSIONS.get(from_unit, {}).get(to_unit, 1)
    return price * multiplier


def _kroger_prices(name: str, zip_code: Optional[str]) -> List[RawPrice]:
    prices = []
    for product in kroger_adapter.search_products(name, zip_code):
        items = product.get("items") or [{}]
        first = items[0]
        prices.append(
            ("Kroger", float((first.get("price") or {}).get("regular") or 0), first.get("size") or "each")
        )
    return prices


def _walmart_prices(name: str, zip_code: Optional[str]) -> List[RawPrice]:
    return [
        ("Walmart", float(item.get("salePrice") or item.get("msrp") or 0), "each")
        for item in walmart_adapter.search_products(name)
    ]


def _spoonacular_prices(name: str, zip_code: Optional[str]) -> List[RawPrice]:
    data = spoonacular_adapter.get(
        f"{spoonacular_adapter.api_root()}/food/ingredients/search", {"query": name}
    )
    prices = []
    for result in data.get("results", []):
        cost = result.get("estimatedCost") or {}
        prices.append(("Average Market Price", float(cost.get("value") or 2.50), cost.get("unit") or "each"))
    return prices


def _mock_prices(name: str, zip_code: Optional[str]) -> List[RawPrice]:
    lowered = name.lower()
    base = next(
        (price for key, price in MOCK_BASE_PRICES.items() if key in lowered), MOCK_DEFAULT_PRICE
    )
    return [(store, round(base * factor, 2), "each") for store, factor in MOCK_STORES]


PROVIDERS = [
    ("kroger", kroger_adapter.is_configured, _kroger_prices),
    ("walmart", walmart_adapter.is_configured, _walmart_prices),
    ("spoonacular", spoonacular_adapter.is_configured, _spoonacular_prices),
    ("mock", lambda: True, _mock_prices),
]


def _fetch(name: str, zip_code: Optional[str]) -> List[RawPrice]:
    for provider, is_configured, search in PROVIDERS:
        if not is_configured():
            continue
        try:
            prices = [p for p in search(name, zip_code) if p[1] > 0]
        except ExternalServiceError as exc:
            logger.warning(f"price_provider_failed provider={provider} ingredient={name!r} error={exc}")
            continue
        if prices:
            logger.debug(f"price_provider_hit provider={provider} ingredient={name!r} count={len(prices)}")
            return prices
    return []


class PricingService:
    @staticmethod
    def get_ingredient_prices(
        name: str,
        zip_code: Optional[str] = None,
        quantity: float = 1,
        unit: str = "each",
    ) -> List[IngredientPrice]:
        key = f"{name.lower()}-{zip_code or 'default'}"
        cached = _cache.get(key)
        if cached and _clock() - cached[0] < settings.price_cache_ttl_sec:
            raw = cached[1]
        else:
            raw = _fetch(name, zip_code)
            _cache[key] = (_clock(), raw)

        now = datetime.utcnow()
        return [
            IngredientPrice(
                store_id=store_id_for(store),
                store_name=store,
                price=round(adjust_price_for_quantity(price, price_unit, unit, quantity), 2),
                unit=price_unit,
                in_stock=True,
                last_updated=now,
            )
            for store, price, price_unit in raw
        ]

    @staticmethod
    def get_best_price(
        name: str, quantity: float = 1, unit: str = "each", zip_code: Optional[str] = None
    ) -> float:
        prices = PricingService.get_ingredient_prices(name, zip_code, quantity, unit)
        if not prices:
            return round(estimate_price(name, quantity), 2)
        return min(p.price for p in prices)

    @staticmethod
    def get_average_price(
        name: str, quantity: float = 1, unit: str = "each", zip_code: Optional[str] = None
    ) -> float:
        prices = PricingService.get_ingredient_prices(name, zip_code, quantity, unit)
        if not prices:
            return round(estimate_price(name, quantity), 2)
        return round(sum(p.price for p in prices) / len(prices), 2)

    @staticmethod
    def get_store_price(
        name: str, store_name: str, quantity: float = 1, zip_code: Optional[str] = None
    ) -> Optional[float]:
        """Price at one store, matched on the store name (case-insensitive)"""
        wanted = store_name.lower()
        for price in PricingService.get_ingredient_prices(name, zip_code, quantity):
            if price.store_name.lower() in wanted or wanted in price.store_name.lower():
                return price.price
        return None

    @staticmethod
    def clear_cache():
        clear_cache()
