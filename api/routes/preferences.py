"""Saved addresses, payment methods and preference documents"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from domain.models import get_db_session
from domain.schemas.preference_schemas import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    DeliveryPreferences,
    MealPlanPreferences,
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentMethodUpdate,
    ShoppingPreferences,
)
from services.preferences_service import PreferencesService

router = APIRouter(prefix="/preferences", tags=["Preferences"])
logger = logging.getLogger("mealplanner.api.preferences")


@router.get("/addresses", response_model=List[AddressResponse])
def list_addresses(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return PreferencesService.list_addresses(db, user_id)


@router.get("/addresses/default", response_model=Optional[AddressResponse])
def get_default_address(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return PreferencesService.get_default_address(db, user_id)


@router.post("/addresses", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
def save_address(
    body: AddressCreate, user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    return PreferencesService.save_address(db, user_id, body)


@router.patch("/addresses/{address_id}", response_model=AddressResponse)
def update_address(
    address_id: UUID, changes: AddressUpdate, db: Session = Depends(get_db_session)
):
    return PreferencesService.update_address(db, address_id, changes)


@router.delete("/addresses/{address_id}")
def delete_address(address_id: UUID, db: Session = Depends(get_db_session)):
    PreferencesService.delete_address(db, address_id)
    return {"status": "ok", "removed": str(address_id)}


@router.get("/payment-methods", response_model=List[PaymentMethodResponse])
def list_payment_methods(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return PreferencesService.list_payment_methods(db, user_id)


@router.get("/payment-methods/default", response_model=Optional[PaymentMethodResponse])
def get_default_payment_method(
    user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    return PreferencesService.get_default_payment_method(db, user_id)


@router.post(
    "/payment-methods",
    response_model=PaymentMethodResponse,
    status_code=status.HTTP_201_CREATED,
)
def save_payment_method(
    body: PaymentMethodCreate, user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    return PreferencesService.save_payment_method(db, user_id, body)


@router.patch("/payment-methods/{payment_method_id}", response_model=PaymentMethodResponse)
def update_payment_method(
    payment_method_id: UUID, changes: PaymentMethodUpdate, db: Session = Depends(get_db_session)
):
    return PreferencesService.update_payment_method(db, payment_method_id, changes)


@router.delete("/payment-methods/{payment_method_id}")
def delete_payment_method(payment_method_id: UUID, db: Session = Depends(get_db_session)):
    PreferencesService.delete_payment_method(db, payment_method_id)
    return {"status": "ok", "removed": str(payment_method_id)}


# Preference documents. PUT bodies are merged into what is stored;
# omitted fields keep their current values.


@router.get("/delivery", response_model=DeliveryPreferences)
def get_delivery_preferences(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return PreferencesService.get_delivery_preferences(db, user_id)


@router.put("/delivery", response_model=DeliveryPreferences)
def update_delivery_preferences(
    body: DeliveryPreferences, user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    return PreferencesService.update_delivery_preferences(db, user_id, body)


@router.get("/shopping", response_model=ShoppingPreferences)
def get_shopping_preferences(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return PreferencesService.get_shopping_preferences(db, user_id)


@router.put("/shopping", response_model=ShoppingPreferences)
def update_shopping_preferences(
    body: ShoppingPreferences, user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    return PreferencesService.update_shopping_preferences(db, user_id, body)


@router.get("/meal-plan", response_model=MealPlanPreferences)
def get_meal_plan_preferences(user_id: UUID = Query(...), db: Session = Depends(get_db_session)):
    return PreferencesService.get_meal_plan_preferences(db, user_id)


@router.put("/meal-plan", response_model=MealPlanPreferences)
def update_meal_plan_preferences(
    body: MealPlanPreferences, user_id: UUID = Query(...), db: Session = Depends(get_db_session)
):
    return PreferencesService.update_meal_plan_preferences(db, user_id, body)
