"""Store, delivery slot, cart and order routes"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.models import get_db_session
from domain.schemas.shopping_schemas import (
    DeliverySlot,
    OrderResponse,
    OrderStatusResponse,
    PlaceOrderRequest,
    PriceComparisonRequest,
    ProductSearchRequest,
    ProductSearchResponse,
    Store,
    StoreComparison,
)
from services.shopping_service import ShoppingService

router = APIRouter(prefix="/shopping", tags=["Shopping"])
logger = logging.getLogger("mealplanner.api.shopping")


@router.get("/stores", response_model=List[Store])
def get_stores(zip_code: Optional[str] = Query(None)):
    return ShoppingService.get_available_stores(zip_code)


@router.get("/stores/{store_id}/slots", response_model=List[DeliverySlot])
def get_delivery_slots(store_id: str, days: int = Query(3, ge=1, le=14)):
    return ShoppingService.get_delivery_slots(store_id, days)


@router.post("/search", response_model=ProductSearchResponse)
def search_products(body: ProductSearchRequest):
    """Match grocery list items to products at one store"""
    store = ShoppingService.get_store(body.store_id)
    products = ShoppingService.search_products(store.id, body.items, body.zip_code)
    return ProductSearchResponse(
        store=store,
        products=products,
        totals=ShoppingService.calculate_cart_totals(products, store),
    )


@router.post("/compare", response_model=List[StoreComparison])
def compare_prices(body: PriceComparisonRequest):
    """Cart totals at every store, cheapest first"""
    return ShoppingService.compare_prices(body.items, body.zip_code)


@router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def place_order(body: PlaceOrderRequest, db: Session = Depends(get_db_session)):
    order = ShoppingService.place_order(db, body)
    return OrderResponse.model_validate(order)


@router.get("/orders", response_model=List[OrderResponse])
def list_orders(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return [OrderResponse.model_validate(o) for o in ShoppingService.list_orders(db, user_id)]


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, db: Session = Depends(get_db_session)):
    return OrderResponse.model_validate(ShoppingService.get_order(db, order_id))


@router.get("/orders/{order_id}/status", response_model=OrderStatusResponse)
def get_order_status(order_id: str, db: Session = Depends(get_db_session)):
    return ShoppingService.get_order_status(db, order_id)
