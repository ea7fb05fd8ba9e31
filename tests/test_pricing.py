"""
Tests for ingredient pricing.

This test suite covers:
- Mock store prices when no provider is configured
- Provider failover and the per-ingredient price cache
- Category estimates and unit conversions
- The /pricing routes
"""

import httpx
import pytest

from test_fixtures import client
from adapters import kroger_adapter
from services import pricing_service
from services.pricing_service import (
    PricingService,
    adjust_price_for_quantity,
    categorize_ingredient,
    estimate_price,
    store_id_for,
)
from app.exceptions import ExternalServiceError


def _counting_provider(calls, prices):
    def search(name, zip_code):
        calls.append((name, zip_code))
        return prices

    return search


# =============================================================================
# MOCK STORES
# =============================================================================


def test_mock_prices_across_three_stores():
    prices = PricingService.get_ingredient_prices("Chicken Breast", "62704")

    assert [(p.store_id, p.price) for p in prices] == [
        ("budget_mart", 7.59),
        ("city_grocer", 7.99),
        ("premium_foods", 9.19),
    ]


def test_best_and_average_price():
    assert PricingService.get_best_price("eggs") == 4.74
    assert PricingService.get_average_price("chicken") == 8.26
    assert PricingService.get_best_price("eggs", quantity=2) == 9.48


def test_store_price_lookup():
    assert PricingService.get_store_price("milk", "city grocer") == 3.99
    assert PricingService.get_store_price("milk", "Costco") is None


# =============================================================================
# PROVIDERS AND CACHE
# =============================================================================


def test_failover_skips_failing_and_empty_providers(monkeypatch):
    """
    Verifies:
    - a provider raising ExternalServiceError is skipped
    - zero prices are discarded, so an all-zero provider counts as empty
    - the first provider with usable prices wins
    """

    def failing(name, zip_code):
        raise ExternalServiceError("quota exceeded", service="kroger")

    monkeypatch.setattr(
        pricing_service,
        "PROVIDERS",
        [
            ("kroger", lambda: True, failing),
            ("walmart", lambda: True, lambda n, z: [("Walmart", 0.0, "each")]),
            ("disabled", lambda: False, lambda n, z: [("Nowhere", 1.0, "each")]),
            ("spoonacular", lambda: True, lambda n, z: [("Average Market Price", 2.5, "each")]),
        ],
    )

    prices = PricingService.get_ingredient_prices("rice")

    assert [(p.store_name, p.price) for p in prices] == [("Average Market Price", 2.5)]


def test_prices_are_cached_until_ttl(monkeypatch):
    calls = []
    now = [1000.0]
    monkeypatch.setattr(
        pricing_service,
        "PROVIDERS",
        [("kroger", lambda: True, _counting_provider(calls, [("Kroger", 3.49, "each")]))],
    )
    monkeypatch.setattr(pricing_service, "_clock", lambda: now[0])

    PricingService.get_ingredient_prices("Rice", "62704")
    PricingService.get_ingredient_prices("rice", "62704")
    assert len(calls) == 1

    PricingService.get_ingredient_prices("rice", "10001")
    assert len(calls) == 2

    now[0] += pricing_service.settings.price_cache_ttl_sec + 1
    PricingService.get_ingredient_prices("rice", "62704")
    assert len(calls) == 3


def test_no_prices_falls_back_to_category_estimate(monkeypatch):
    monkeypatch.setattr(pricing_service, "PROVIDERS", [])

    assert PricingService.get_ingredient_prices("chicken") == []
    assert PricingService.get_best_price("chicken", quantity=2) == 16.0
    assert PricingService.get_average_price("saffron") == 2.0


# =============================================================================
# ESTIMATES
# =============================================================================


@pytest.mark.parametrize(
    "name, category",
    [
        ("Greek yogurt", "dairy"),
        ("ground turkey", "meat"),
        ("sourdough bread", "bakery"),
        ("cherry tomatoes", "produce"),
        ("orange juice", "beverages"),
        ("saffron", "pantry"),
    ],
)
def test_categorize_ingredient(name, category):
    assert categorize_ingredient(name) == category


def test_estimate_and_unit_conversion():
    assert estimate_price("apple", 2) == 5.0
    assert adjust_price_for_quantity(2.0, "lb", "oz") == 32.0
    assert adjust_price_for_quantity(2.0, "each", "bunch", quantity=3) == 6.0
    assert store_id_for("Premium  Foods") == "premium_foods"


# =============================================================================
# ROUTES
# =============================================================================


def test_pricing_routes():
    r = client.get("/pricing/ingredients/salmon?zip_code=62704")
    assert r.status_code == 200
    body = r.json()
    assert body["best_price"] == 14.24
    assert len(body["prices"]) == 3

    r2 = client.get("/pricing/ingredients/salmon?zip_code=abc")
    assert r2.status_code == 422

    r3 = client.get("/pricing/estimate?name=apple&quantity=2")
    assert r3.json() == {"ingredient": "apple", "category": "produce", "estimated_price": 5.0}

    assert client.delete("/pricing/cache").json() == {"status": "ok"}


def test_malformed_provider_body_falls_back_to_mock_stores():
    """
    Verifies:
    - a configured provider answering 200 with a non-JSON body is skipped
    - the mock stores still answer
    """
    kroger_adapter.connect(
        "client", "secret", transport=httpx.MockTransport(lambda r: httpx.Response(200, text="not json"))
    )
    try:
        prices = PricingService.get_ingredient_prices("chicken")
    finally:
        kroger_adapter.close()

    assert [p.price for p in prices] == [7.59, 7.99, 9.19]
