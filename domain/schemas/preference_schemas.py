from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.enums import (
    BagPreference,
    CommunicationPreference,
    PaymentMethodType,
    SubstitutionPreference,
)


class AddressCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=50)
    street: str = Field(..., min_length=1)
    apartment: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2, max_length=50)
    zip_code: str = Field(..., pattern=r"^\d{5}(-\d{4})?$")
    delivery_instructions: Optional[str] = None
    is_default: bool = False


class AddressUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=50)
    street: Optional[str] = None
    apartment: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = Field(None, min_length=2, max_length=50)
    zip_code: Optional[str] = Field(None, pattern=r"^\d{5}(-\d{4})?$")
    delivery_instructions: Optional[str] = None
    is_default: Optional[bool] = None


class AddressResponse(AddressCreate):
    address_id: UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PaymentMethodCreate(BaseModel):
    type: PaymentMethodType
    label: str = Field(..., min_length=1, max_length=50)
    last4: Optional[str] = Field(None, pattern=r"^\d{4}$")
    expiry_month: Optional[int] = Field(None, ge=1, le=12)
    expiry_year: Optional[int] = Field(None, ge=2000, le=2100)
    card_brand: Optional[str] = None
    is_default: bool = False


class PaymentMethodUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=50)
    expiry_month: Optional[int] = Field(None, ge=1, le=12)
    expiry_year: Optional[int] = Field(None, ge=2000, le=2100)
    is_default: Optional[bool] = None


class PaymentMethodResponse(PaymentMethodCreate):
    payment_method_id: UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PreferredDeliveryTimes(BaseModel):
    weekday: List[str] = []
    weekend: List[str] = []


class DeliveryPreferences(BaseModel):
    leave_at_door: bool = True
    ring_doorbell: bool = False
    contactless_preferred: bool = True
    special_instructions: Optional[str] = None
    preferred_delivery_times: Optional[PreferredDeliveryTimes] = None


class ShoppingPreferences(BaseModel):
    substitution_preference: SubstitutionPreference = SubstitutionPreference.ASK
    communication_preference: CommunicationPreference = CommunicationPreference.TEXT
    default_tip: float = Field(default=15, ge=0, le=100)
    bag_preference: BagPreference = BagPreference.REUSABLE


class DefaultMealTimes(BaseModel):
    breakfast: str = "08:00"
    lunch: str = "12:30"
    dinner: str = "18:30"


class FreshnessPreferences(BaseModel):
    seafood_days: int = Field(default=2, ge=1, le=7)
    poultry_days: int = Field(default=3, ge=1, le=7)
    ground_meat_days: int = Field(default=2, ge=1, le=7)
    produce_days: int = Field(default=5, ge=1, le=14)
    prefer_frozen: bool = True


class MealPlanPreferences(BaseModel):
    default_meal_times: DefaultMealTimes = Field(default_factory=DefaultMealTimes)
    freshness: FreshnessPreferences = Field(default_factory=FreshnessPreferences)
