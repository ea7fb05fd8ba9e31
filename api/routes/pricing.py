"""Ingredient pricing routes"""

from fastapi import APIRouter, Query
from typing import Optional
import logging

from domain.schemas.shopping_schemas import IngredientPriceResponse
from services.pricing_service import (
    PricingService,
    categorize_ingredient,
    estimate_price,
)

router = APIRouter(prefix="/pricing", tags=["Pricing"])
logger = logging.getLogger("mealplanner.api.pricing")


@router.get("/ingredients/{name}", response_model=IngredientPriceResponse)
def get_ingredient_prices(
    name: str,
    zip_code: Optional[str] = Query(None, pattern=r"^\d{5}$"),
    quantity: float = Query(1, gt=0),
    unit: str = Query("each"),
):
    """Prices across stores from the first provider that answers"""
    prices = PricingService.get_ingredient_prices(name, zip_code, quantity, unit)
    if prices:
        best = min(p.price for p in prices)
        average = round(sum(p.price for p in prices) / len(prices), 2)
    else:
        best = average = round(estimate_price(name, quantity), 2)
    return IngredientPriceResponse(
        ingredient=name,
        zip_code=zip_code,
        prices=prices,
        best_price=best,
        average_price=average,
    )


@router.get("/estimate")
def estimate(name: str = Query(..., min_length=1), quantity: float = Query(1, gt=0)):
    """Category-based estimate used when no provider has a price"""
    return {
        "ingredient": name,
        "category": categorize_ingredient(name),
        "estimated_price": round(estimate_price(name, quantity), 2),
    }


@router.delete("/cache")
def clear_price_cache():
    PricingService.clear_cache()
    return {"status": "ok"}
