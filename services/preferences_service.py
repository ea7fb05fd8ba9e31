"""
Saved addresses, payment methods and the user's delivery, shopping and
meal-plan preference documents.
"""

from typing import List, Optional, Type, TypeVar
from uuid import UUID
from pydantic import BaseModel
from sqlalchemy.orm import Session
import logging

from domain.models import SavedAddress, SavedPaymentMethod
from domain.schemas.preference_schemas import (
    AddressCreate,
    AddressUpdate,
    DeliveryPreferences,
    MealPlanPreferences,
    PaymentMethodCreate,
    PaymentMethodUpdate,
    ShoppingPreferences,
)
from repositories import (
    AddressRepository,
    PaymentMethodRepository,
    PreferenceSettingsRepository,
    UserRepository,
)
from app.exceptions import NotFoundError

logger = logging.getLogger("mealplanner.preferences")

PreferenceModel = TypeVar("PreferenceModel", bound=BaseModel)


def _ensure_user(db: Session, user_id: UUID):
    if not UserRepository(db).exists(user_id):
        raise NotFoundError(f"User not found: {user_id}")


def _merge(stored: Optional[dict], changes: BaseModel, schema: Type[PreferenceModel]) -> PreferenceModel:
    """Overlay the fields set in ``changes`` on the stored document (or defaults)"""
    current = schema.model_validate(stored or {}).model_dump(mode="json")
    _deep_update(current, changes.model_dump(mode="json", exclude_unset=True))
    return schema.model_validate(current)


def _deep_update(target: dict, updates: dict) -> dict:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value
    return target


class PreferencesService:
    # Addresses

    @staticmethod
    def list_addresses(db: Session, user_id: UUID) -> List[SavedAddress]:
        return AddressRepository(db).get_by_user_id(user_id)

    @staticmethod
    def get_default_address(db: Session, user_id: UUID) -> Optional[SavedAddress]:
        return AddressRepository(db).get_default(user_id)

    @staticmethod
    def save_address(db: Session, user_id: UUID, data: AddressCreate) -> SavedAddress:
        _ensure_user(db, user_id)
        repo = AddressRepository(db)
        address = SavedAddress(user_id=user_id, **data.model_dump())
        try:
            if data.is_default:
                repo.clear_default(user_id)
            address = repo.create(address)
        except Exception:
            db.rollback()
            logger.exception(f"address_save_failed user_id={user_id}")
            raise
        logger.info(f"address_saved user_id={user_id} address_id={address.address_id}")
        return address

    @staticmethod
    def update_address(db: Session, address_id: UUID, changes: AddressUpdate) -> SavedAddress:
        repo = AddressRepository(db)
        address = repo.get_by_id(address_id)
        if not address:
            raise NotFoundError(f"Address not found: {address_id}")
        data = changes.model_dump(exclude_unset=True)
        try:
            if data.get("is_default"):
                repo.clear_default(address.user_id, keep_id=address_id)
            return repo.apply_changes(address, data)
        except Exception:
            db.rollback()
            logger.exception(f"address_update_failed address_id={address_id}")
            raise

    @staticmethod
    def delete_address(db: Session, address_id: UUID) -> bool:
        if not AddressRepository(db).delete(address_id):
            raise NotFoundError(f"Address not found: {address_id}")
        return True

    # Payment methods

    @staticmethod
    def list_payment_methods(db: Session, user_id: UUID) -> List[SavedPaymentMethod]:
        return PaymentMethodRepository(db).get_by_user_id(user_id)

    @staticmethod
    def get_default_payment_method(db: Session, user_id: UUID) -> Optional[SavedPaymentMethod]:
        return PaymentMethodRepository(db).get_default(user_id)

    @staticmethod
    def save_payment_method(
        db: Session, user_id: UUID, data: PaymentMethodCreate
    ) -> SavedPaymentMethod:
        _ensure_user(db, user_id)
        repo = PaymentMethodRepository(db)
        method = SavedPaymentMethod(user_id=user_id, **data.model_dump())
        try:
            if data.is_default:
                repo.clear_default(user_id)
            method = repo.create(method)
        except Exception:
            db.rollback()
            logger.exception(f"payment_method_save_failed user_id={user_id}")
            raise
        logger.info(
            f"payment_method_saved user_id={user_id} payment_method_id={method.payment_method_id}"
        )
        return method

    @staticmethod
    def update_payment_method(
        db: Session, payment_method_id: UUID, changes: PaymentMethodUpdate
    ) -> SavedPaymentMethod:
        repo = PaymentMethodRepository(db)
        method = repo.get_by_id(payment_method_id)
        if not method:
            raise NotFoundError(f"Payment method not found: {payment_method_id}")
        data = changes.model_dump(exclude_unset=True)
        try:
            if data.get("is_default"):
                repo.clear_default(method.user_id, keep_id=payment_method_id)
            return repo.apply_changes(method, data)
        except Exception:
            db.rollback()
            logger.exception(f"payment_method_update_failed payment_method_id={payment_method_id}")
            raise

    @staticmethod
    def delete_payment_method(db: Session, payment_method_id: UUID) -> bool:
        if not PaymentMethodRepository(db).delete(payment_method_id):
            raise NotFoundError(f"Payment method not found: {payment_method_id}")
        return True

    # Preference documents

    @staticmethod
    def _get_document(db: Session, user_id: UUID, column: str, schema):
        row = PreferenceSettingsRepository(db).get_by_id(user_id)
        return schema.model_validate(getattr(row, column, None) or {})

    @staticmethod
    def _update_document(db: Session, user_id: UUID, column: str, schema, changes: BaseModel):
        _ensure_user(db, user_id)
        repo = PreferenceSettingsRepository(db)
        try:
            row = repo.get_or_create(user_id)
            merged = _merge(getattr(row, column), changes, schema)
            setattr(row, column, merged.model_dump(mode="json"))
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"preferences_update_failed user_id={user_id} section={column}")
            raise
        logger.info(f"preferences_updated user_id={user_id} section={column}")
        return merged

    @staticmethod
    def get_delivery_preferences(db: Session, user_id: UUID) -> DeliveryPreferences:
        return PreferencesService._get_document(db, user_id, "delivery", DeliveryPreferences)

    @staticmethod
    def update_delivery_preferences(
        db: Session, user_id: UUID, changes: DeliveryPreferences
    ) -> DeliveryPreferences:
        return PreferencesService._update_document(
            db, user_id, "delivery", DeliveryPreferences, changes
        )

    @staticmethod
    def get_shopping_preferences(db: Session, user_id: UUID) -> ShoppingPreferences:
        return PreferencesService._get_document(db, user_id, "shopping", ShoppingPreferences)

    @staticmethod
    def update_shopping_preferences(
        db: Session, user_id: UUID, changes: ShoppingPreferences
    ) -> ShoppingPreferences:
        return PreferencesService._update_document(
            db, user_id, "shopping", ShoppingPreferences, changes
        )

    @staticmethod
    def get_meal_plan_preferences(db: Session, user_id: UUID) -> MealPlanPreferences:
        return PreferencesService._get_document(db, user_id, "meal_plan", MealPlanPreferences)

    @staticmethod
    def update_meal_plan_preferences(
        db: Session, user_id: UUID, changes: MealPlanPreferences
    ) -> MealPlanPreferences:
        return PreferencesService._update_document(
            db, user_id, "meal_plan", MealPlanPreferences, changes
        )
