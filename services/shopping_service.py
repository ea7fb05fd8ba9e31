"""
Simulated grocery delivery: stores, delivery slots, product matching,
cart totals and orders.

Randomness (slot availability, discounts, brands, stock) comes from a
``random.Random`` that callers may pass in to get repeatable results.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session
import logging
import random
import re
import string

from domain.enums import OrderStatus, StoreType
from domain.models import ShoppingOrder
from domain.schemas.shopping_schemas import (
    CartItemInput,
    CartTotals,
    DeliverySlot,
    OrderStatusResponse,
    PlaceOrderRequest,
    Store,
    StoreComparison,
    StoreProduct,
)
from repositories import AddressRepository, OrderRepository, UserRepository
from services.pricing_service import PricingService
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("mealplanner.shopping")

STORES = [
    Store(
        id="instacart_1",
        name="Whole Foods via Instacart",
        type=StoreType.INSTACART,
        delivery_fee=3.99,
        minimum_order=35,
        estimated_delivery_time="2 hours",
        rating=4.8,
        price_level=3,
    ),
    Store(
        id="walmart_1",
        name="Walmart Grocery",
        type=StoreType.WALMART,
        delivery_fee=7.95,
        minimum_order=35,
        estimated_delivery_time="Same day",
        rating=4.5,
        price_level=1,
    ),
    Store(
        id="instacart_2",
        name="Kroger via Instacart",
        type=StoreType.INSTACART,
        delivery_fee=3.99,
        minimum_order=35,
        estimated_delivery_time="2-3 hours",
        rating=4.6,
        price_level=2,
    ),
    Store(
        id="amazon_fresh",
        name="Amazon Fresh",
        type=StoreType.AMAZON,
        delivery_fee=0,
        minimum_order=35,
        estimated_delivery_time="2 hour windows",
        rating=4.7,
        price_level=2,
    ),
]

SLOT_HOURS = range(8, 20, 2)
SLOT_LENGTH_HOURS = 2
SLOT_AVAILABILITY = 0.7
SLOT_BASE_PRICE = 3.99
EVENING_SURCHARGE = 2.00
EVENING_START_HOUR = 17

DISCOUNT_PROBABILITY = 0.3
DISCOUNT_FACTOR = 0.85
IN_STOCK_PROBABILITY = 0.9
SERVICE_FEE_RATE = 0.05
TAX_RATE = 0.08

BRANDS = {
    "Produce": ["Fresh Farms", "Organic Valley", "Local Harvest"],
    "Dairy & Eggs": ["Horizon", "Organic Valley", "Land O Lakes"],
    "Meat & Seafood": ["Tyson", "Perdue", "Wild Caught"],
    "Pantry": ["Barilla", "Campbell's", "General Mills"],
    "Frozen": ["Birds Eye", "Healthy Choice", "Amy's"],
    "Bakery": ["Wonder", "Dave's Killer", "Nature's Own"],
    "Beverages": ["Coca-Cola", "Simply", "Tropicana"],
    "Snacks": ["Lay's", "Oreo", "Nature Valley"],
}
GENERIC_BRAND = "Generic"

PRODUCT_IMAGES = {
    "chicken": "https://images.unsplash.com/photo-1604503468506-a8da13d82791?w=200",
    "broccoli": "https://images.unsplash.com/photo-1459411621453-7b03977f4bfc?w=200",
    "milk": "https://images.unsplash.com/photo-1563636619-e9143da7973b?w=200",
    "eggs": "https://images.unsplash.com/photo-1491524062933-cb0289261700?w=200",
    "bread": "https://images.unsplash.com/photo-1549931319-a545dcf3bc73?w=200",
    "rice": "https://images.unsplash.com/photo-1586201375761-83865001e31c?w=200",
    "pasta": "https://images.unsplash.com/photo-1551462147-ff29053bfc14?w=200",
}
DEFAULT_PRODUCT_IMAGE = "https://images.unsplash.com/photo-1556909114-f6e7ad7d3136?w=200"

TRACKING_URL = "https://track.example.com/{order_id}"
ORDER_DELIVERY_HOURS = 4

# hours since placement -> status, checked from the top
STATUS_TIMELINE = [
    (4, OrderStatus.DELIVERED),
    (3, OrderStatus.DELIVERING),
    (1, OrderStatus.PREPARING),
    (0.1, OrderStatus.CONFIRMED),
]

_rng = random.Random()
_ID_CHARS = string.ascii_lowercase + string.digits
_AMOUNT_RE = re.compile(r"^\s*(\d+\.?\d*)\s*(.*)$")


def _utcnow() -> datetime:
    return datetime.utcnow()


def _random_suffix(rng: random.Random, length: int = 9) -> str:
    return "".join(rng.choice(_ID_CHARS) for _ in range(length))


def parse_quantity(quantity: str) -> Tuple[float, str]:
    """Split "2.5 lbs" into (2.5, "lbs"); missing parts default to 1 and "each"."""
    match = _AMOUNT_RE.match(quantity or "")
    if not match:
        return 1.0, (quantity or "").strip() or "each"
    amount = float(match.group(1)) or 1.0
    return amount, match.group(2).strip() or "each"


def brand_for(category: str, rng: random.Random) -> str:
    return rng.choice(BRANDS.get(category, [GENERIC_BRAND]))


def image_for(name: str) -> str:
    lowered = name.lower()
    return next((url for key, url in PRODUCT_IMAGES.items() if key in lowered), DEFAULT_PRODUCT_IMAGE)


def status_for_elapsed(hours: float) -> OrderStatus:
    for threshold, status in STATUS_TIMELINE:
        if hours > threshold:
            return status
    return OrderStatus.PENDING


class ShoppingService:
    @staticmethod
    def get_available_stores(zip_code: Optional[str] = None) -> List[Store]:
        return list(STORES)

    @staticmethod
    def get_store(store_id: str) -> Store:
        store = next((s for s in STORES if s.id == store_id), None)
        if store is None:
            raise NotFoundError(f"Store not found: {store_id}")
        return store

    @staticmethod
    def get_delivery_slots(
        store_id: str,
        days: int = 3,
        start: Optional[date] = None,
        rng: Optional[random.Random] = None,
    ) -> List[DeliverySlot]:
        ShoppingService.get_store(store_id)
        rng = rng or _rng
        start = start or date.today()
        slots = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            for hour in SLOT_HOURS:
                slots.append(
                    DeliverySlot(
                        id=f"slot_{offset}_{hour}",
                        date=day,
                        start_hour=hour,
                        end_hour=hour + SLOT_LENGTH_HOURS,
                        available=rng.random() < SLOT_AVAILABILITY,
                        price=round(
                            SLOT_BASE_PRICE + (EVENING_SURCHARGE if hour >= EVENING_START_HOUR else 0), 2
                        ),
                    )
                )
        return slots

    @staticmethod
    def search_products(
        store_id: str,
        items: Iterable[CartItemInput],
        zip_code: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> List[StoreProduct]:
        """Match grocery items to store products with simulated prices and stock"""
        store = ShoppingService.get_store(store_id)
        rng = rng or _rng
        products = []
        for item in items:
            amount, unit = parse_quantity(item.quantity)
            price = (
                PricingService.get_store_price(item.name, store.name, amount, zip_code)
                or PricingService.get_average_price(item.name, amount, unit, zip_code)
                or item.estimated_price
            )

            original_price = None
            if rng.random() < DISCOUNT_PROBABILITY:
                original_price = round(price, 2)
                price = price * DISCOUNT_FACTOR

            products.append(
                StoreProduct(
                    id=f"prod_{_random_suffix(rng)}",
                    grocery_item_name=item.name,
                    name=item.name,
                    brand=brand_for(item.category, rng),
                    price=round(price, 2),
                    original_price=original_price,
                    unit=unit,
                    size=item.quantity,
                    quantity=1,
                    category=item.category,
                    image=image_for(item.name),
                    in_stock=rng.random() < IN_STOCK_PROBABILITY,
                )
            )
        return products

    @staticmethod
    def calculate_cart_totals(products: Iterable[StoreProduct], store: Store) -> CartTotals:
        products = list(products)
        subtotal = sum(p.price * p.quantity for p in products)
        service_fee = subtotal * SERVICE_FEE_RATE
        tax = subtotal * TAX_RATE
        savings = sum(
            (p.original_price - p.price) * p.quantity
            for p in products
            if p.original_price is not None
        )
        return CartTotals(
            subtotal=round(subtotal, 2),
            delivery_fee=store.delivery_fee,
            service_fee=round(service_fee, 2),
            tax=round(tax, 2),
            total=round(subtotal + store.delivery_fee + service_fee + tax, 2),
            estimated_savings=round(savings, 2),
            meets_minimum=subtotal >= store.minimum_order,
        )

    @staticmethod
    def compare_prices(
        items: List[CartItemInput],
        zip_code: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> List[StoreComparison]:
        comparisons = []
        for store in ShoppingService.get_available_stores(zip_code):
            products = ShoppingService.search_products(store.id, items, zip_code, rng)
            available = sum(1 for p in products if p.in_stock)
            comparisons.append(
                StoreComparison(
                    store=store,
                    totals=ShoppingService.calculate_cart_totals(products, store),
                    available_items=available,
                    unavailable_items=len(products) - available,
                )
            )
        comparisons.sort(key=lambda c: c.totals.total)
        return comparisons

    @staticmethod
    def place_order(
        db: Session, request: PlaceOrderRequest, rng: Optional[random.Random] = None
    ) -> ShoppingOrder:
        store = ShoppingService.get_store(request.store_id)
        if not request.products:
            raise ServiceValidationError("Cannot place an order with an empty cart", code="EMPTY_CART")
        if not UserRepository(db).exists(request.user_id):
            raise NotFoundError(f"User not found: {request.user_id}")

        address = request.delivery_address
        if address is None:
            default = AddressRepository(db).get_default(request.user_id)
            if default is not None:
                address = {
                    "label": default.label,
                    "street": default.street,
                    "apartment": default.apartment,
                    "city": default.city,
                    "state": default.state,
                    "zip_code": default.zip_code,
                }

        rng = rng or _rng
        placed_at = _utcnow()
        order_id = f"order_{int(placed_at.timestamp() * 1000)}_{_random_suffix(rng)}"
        slot = request.delivery_slot
        totals = ShoppingService.calculate_cart_totals(request.products, store)

        order = ShoppingOrder(
            order_id=order_id,
            user_id=request.user_id,
            store_id=store.id,
            items=[p.model_dump(mode="json") for p in request.products],
            subtotal=totals.subtotal,
            delivery_fee=totals.delivery_fee,
            service_fee=totals.service_fee,
            tax=totals.tax,
            tip=request.tip,
            total=round(totals.total + request.tip, 2),
            delivery_slot=slot.model_dump(mode="json"),
            delivery_address=address,
            status=OrderStatus.CONFIRMED,
            placed_at=placed_at,
            estimated_delivery=datetime.combine(slot.date, datetime.min.time())
            + timedelta(hours=slot.start_hour + 1),
            tracking_url=TRACKING_URL.format(order_id=order_id),
        )
        try:
            order = OrderRepository(db).create(order)
        except Exception:
            db.rollback()
            logger.exception(f"order_place_failed user_id={request.user_id} store_id={store.id}")
            raise
        logger.info(
            f"order_placed order_id={order_id} store_id={store.id} "
            f"items={len(request.products)} total={order.total}"
        )
        return order

    @staticmethod
    def get_order(db: Session, order_id: str) -> ShoppingOrder:
        order = OrderRepository(db).get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order not found: {order_id}")
        return order

    @staticmethod
    def get_order_status(
        db: Session, order_id: str, now: Optional[datetime] = None
    ) -> OrderStatusResponse:
        order = ShoppingService.get_order(db, order_id)
        elapsed = ((now or _utcnow()) - order.placed_at).total_seconds() / 3600
        return OrderStatusResponse(
            order_id=order.order_id,
            status=status_for_elapsed(elapsed),
            estimated_delivery=order.placed_at + timedelta(hours=ORDER_DELIVERY_HOURS),
            tracking_url=order.tracking_url,
        )

    @staticmethod
    def list_orders(db: Session, user_id: UUID) -> List[ShoppingOrder]:
        return OrderRepository(db).get_by_user_id(user_id)
