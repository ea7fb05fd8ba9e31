"""
Tests for simulated grocery delivery.

This test suite covers:
- Delivery slots and their evening surcharge
- Matching grocery items to store products
- Cart totals (service fee, tax, savings, order minimum)
- Placing orders and deriving order status from elapsed time
"""

import random
from datetime import date, timedelta

import pytest
from sqlalchemy.orm import Session

from test_fixtures import client, db_session, create_user
from domain.enums import OrderStatus
from domain.schemas.preference_schemas import AddressCreate
from domain.schemas.shopping_schemas import (
    CartItemInput,
    DeliverySlot,
    PlaceOrderRequest,
    StoreProduct,
)
from services.preferences_service import PreferencesService
from services.shopping_service import (
    BRANDS,
    ShoppingService,
    parse_quantity,
    status_for_elapsed,
)
from app.exceptions import NotFoundError, ServiceValidationError


def _product(name="chicken breast", price=10.0, quantity=1, original_price=None):
    return StoreProduct(
        id=f"prod_{name.replace(' ', '_')}",
        grocery_item_name=name,
        name=name,
        brand="Tyson",
        price=price,
        original_price=original_price,
        unit="lb",
        size="1 lb",
        quantity=quantity,
        category="Meat & Seafood",
        image="https://example.com/p.png",
    )


def _slot():
    return DeliverySlot(id="slot_1_10", date=date(2025, 3, 11), start_hour=10, end_hour=12, price=3.99)


# =============================================================================
# STORES AND SLOTS
# =============================================================================


def test_delivery_slots_cover_each_day():
    """
    Verifies:
    - six two-hour slots per day from 8:00
    - slots from 17:00 carry the evening surcharge
    - the same seed gives the same availability
    """
    start = date(2025, 3, 10)
    slots = ShoppingService.get_delivery_slots("walmart_1", days=2, start=start, rng=random.Random(7))

    assert len(slots) == 12
    assert slots[0].id == "slot_0_8"
    assert slots[-1].id == "slot_1_18"
    assert slots[-1].date == start + timedelta(days=1)
    assert {s.price for s in slots if s.start_hour < 17} == {3.99}
    assert {s.price for s in slots if s.start_hour >= 17} == {5.99}

    again = ShoppingService.get_delivery_slots("walmart_1", days=2, start=start, rng=random.Random(7))
    assert [s.available for s in again] == [s.available for s in slots]


def test_unknown_store():
    with pytest.raises(NotFoundError):
        ShoppingService.get_store("corner_shop")

    r = client.get("/shopping/stores/corner_shop/slots")
    assert r.status_code == 404


def test_parse_quantity():
    assert parse_quantity("2.5 lbs") == (2.5, "lbs")
    assert parse_quantity("3") == (3.0, "each")
    assert parse_quantity("a bunch") == (1.0, "a bunch")


# =============================================================================
# PRODUCTS AND TOTALS
# =============================================================================


def test_search_products_prices_from_average_store_price():
    items = [CartItemInput(name="chicken breast", quantity="2 lb", category="Meat & Seafood")]

    product = ShoppingService.search_products("walmart_1", items, rng=random.Random(3))[0]

    assert product.grocery_item_name == "chicken breast"
    assert product.unit == "lb"
    assert product.brand in BRANDS["Meat & Seafood"]
    assert product.id.startswith("prod_")
    if product.original_price is None:
        assert product.price == 16.51
    else:
        assert product.original_price == 16.51
        assert product.price == round(16.51 * 0.85, 2)


def test_cart_totals():
    store = ShoppingService.get_store("instacart_1")
    products = [_product(price=10.0, quantity=2), _product("salmon", price=20.0, original_price=25.0)]

    totals = ShoppingService.calculate_cart_totals(products, store)

    assert totals.subtotal == 40.0
    assert totals.service_fee == 2.0
    assert totals.tax == 3.2
    assert totals.total == 49.19
    assert totals.estimated_savings == 5.0
    assert totals.meets_minimum is True

    small = ShoppingService.calculate_cart_totals([_product(price=5.0)], store)
    assert small.meets_minimum is False


def test_compare_prices_sorted_by_total():
    items = [CartItemInput(name="rice", quantity="1 bag", category="Pantry")]

    comparisons = ShoppingService.compare_prices(items, rng=random.Random(11))

    assert len(comparisons) == 4
    totals = [c.totals.total for c in comparisons]
    assert totals == sorted(totals)
    assert all(c.available_items + c.unavailable_items == 1 for c in comparisons)


# =============================================================================
# ORDERS (SQLite)
# =============================================================================


@pytest.mark.parametrize(
    "hours, expected",
    [
        (0.05, OrderStatus.PENDING),
        (0.5, OrderStatus.CONFIRMED),
        (2, OrderStatus.PREPARING),
        (3.5, OrderStatus.DELIVERING),
        (5, OrderStatus.DELIVERED),
    ],
)
def test_status_for_elapsed(hours, expected):
    assert status_for_elapsed(hours) == expected


def test_place_order_uses_default_address_and_tip(db_session: Session):
    user = create_user(db_session)
    PreferencesService.save_address(
        db_session,
        user.user_id,
        AddressCreate(
            label="Home", street="12 Elm St", city="Springfield", state="IL",
            zip_code="62704", is_default=True,
        ),
    )

    order = ShoppingService.place_order(
        db_session,
        PlaceOrderRequest(
            user_id=user.user_id,
            store_id="instacart_1",
            products=[_product(price=20.0, quantity=2)],
            delivery_slot=_slot(),
            tip=5.0,
        ),
        rng=random.Random(1),
    )

    assert order.order_id.startswith("order_")
    assert order.status == OrderStatus.CONFIRMED
    assert order.delivery_address["street"] == "12 Elm St"
    assert order.total == round(40.0 + 3.99 + 2.0 + 3.2 + 5.0, 2)
    assert order.tracking_url.endswith(order.order_id)

    status = ShoppingService.get_order_status(
        db_session, order.order_id, now=order.placed_at + timedelta(hours=2)
    )
    assert status.status == OrderStatus.PREPARING
    assert status.estimated_delivery == order.placed_at + timedelta(hours=4)

    assert [o.order_id for o in ShoppingService.list_orders(db_session, user.user_id)] == [
        order.order_id
    ]


def test_place_order_rejects_empty_cart(db_session: Session):
    request = PlaceOrderRequest.model_construct(
        user_id=create_user(db_session).user_id,
        store_id="walmart_1",
        products=[],
        delivery_slot=_slot(),
        delivery_address=None,
        tip=0,
    )

    with pytest.raises(ServiceValidationError) as exc_info:
        ShoppingService.place_order(db_session, request)
    assert exc_info.value.code == "EMPTY_CART"


def test_order_routes(db_session: Session):
    user = create_user(db_session)

    r = client.post(
        "/shopping/orders",
        json={
            "user_id": str(user.user_id),
            "store_id": "amazon_fresh",
            "products": [_product(price=12.5).model_dump(mode="json")],
            "delivery_slot": _slot().model_dump(mode="json"),
            "delivery_address": {"street": "1 Main St", "city": "Springfield"},
        },
    )
    assert r.status_code == 201
    order_id = r.json()["order_id"]
    assert r.json()["delivery_fee"] == 0

    r2 = client.get(f"/shopping/orders/{order_id}/status")
    assert r2.status_code == 200
    assert r2.json()["status"] == "pending"

    r3 = client.post(
        "/shopping/orders",
        json={
            "user_id": str(user.user_id),
            "store_id": "amazon_fresh",
            "products": [],
            "delivery_slot": _slot().model_dump(mode="json"),
        },
    )
    assert r3.status_code == 422

    assert client.get("/shopping/orders/order_missing").status_code == 404
