from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import OrderStatus, StoreType


class IngredientPrice(BaseModel):
    store_id: str
    store_name: str
    price: float
    unit: str = "each"
    in_stock: bool = True
    last_updated: datetime


class IngredientPriceResponse(BaseModel):
    ingredient: str
    zip_code: Optional[str] = None
    prices: List[IngredientPrice]
    best_price: float
    average_price: float


class Store(BaseModel):
    id: str
    name: str
    type: StoreType
    delivery_fee: float
    minimum_order: float
    estimated_delivery_time: str
    rating: float
    price_level: int = Field(..., ge=1, le=4)


class DeliverySlot(BaseModel):
    id: str
    date: date_type
    start_hour: int = Field(..., ge=0, le=23)
    end_hour: int = Field(..., ge=1, le=24)
    available: bool = True
    price: float = 0


class CartItemInput(BaseModel):
    """Grocery list line handed to the store search"""

    name: str
    quantity: str = "1"
    category: str = "other"
    estimated_price: float = Field(default=0, ge=0)


class StoreProduct(BaseModel):
    id: str
    grocery_item_name: str
    name: str
    brand: str
    price: float = Field(..., ge=0)
    original_price: Optional[float] = None
    unit: str
    size: str
    quantity: int = Field(default=1, ge=1)
    category: str
    image: str
    in_stock: bool = True


class CartTotals(BaseModel):
    subtotal: float
    delivery_fee: float
    service_fee: float
    tax: float
    total: float
    estimated_savings: float
    meets_minimum: bool


class ProductSearchRequest(BaseModel):
    store_id: str
    items: List[CartItemInput]
    zip_code: Optional[str] = None


class ProductSearchResponse(BaseModel):
    store: Store
    products: List[StoreProduct]
    totals: CartTotals


class StoreComparison(BaseModel):
    store: Store
    totals: CartTotals
    available_items: int
    unavailable_items: int


class PriceComparisonRequest(BaseModel):
    items: List[CartItemInput] = Field(..., min_length=1)
    zip_code: Optional[str] = None


class PlaceOrderRequest(BaseModel):
    user_id: UUID
    store_id: str
    products: List[StoreProduct] = Field(..., min_length=1)
    delivery_slot: DeliverySlot
    delivery_address: Optional[Dict[str, Any]] = None
    tip: float = Field(default=0, ge=0)


class OrderResponse(BaseModel):
    order_id: str
    user_id: UUID
    store_id: str
    items: List[StoreProduct]
    subtotal: float
    delivery_fee: float
    service_fee: float
    tax: float
    tip: float = 0
    total: float
    delivery_slot: DeliverySlot
    delivery_address: Optional[Dict[str, Any]] = None
    status: OrderStatus
    placed_at: datetime
    estimated_delivery: Optional[datetime] = None
    tracking_url: Optional[str] = None

    model_config = {"from_attributes": True}


class OrderStatusResponse(BaseModel):
    order_id: str
    status: OrderStatus
    estimated_delivery: datetime
    tracking_url: Optional[str] = None
