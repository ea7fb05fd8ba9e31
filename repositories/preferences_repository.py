"""
Preferences Repository - Data access for addresses, payment methods and preference documents
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import SavedAddress, SavedPaymentMethod, UserPreferenceSettings


class AddressRepository(BaseRepository[SavedAddress]):
    def __init__(self, db: Session):
        super().__init__(db, SavedAddress)

    def get_by_user_id(self, user_id: UUID) -> List[SavedAddress]:
        return (
            self.db.query(SavedAddress)
            .filter(SavedAddress.user_id == user_id)
            .order_by(SavedAddress.is_default.desc(), SavedAddress.created_at)
            .all()
        )

    def get_default(self, user_id: UUID) -> Optional[SavedAddress]:
        return (
            self.db.query(SavedAddress)
            .filter(SavedAddress.user_id == user_id, SavedAddress.is_default.is_(True))
            .first()
        )

    def clear_default(self, user_id: UUID, keep_id: UUID = None) -> None:
        """Unset the default flag on every other address (no commit)"""
        query = self.db.query(SavedAddress).filter(
            SavedAddress.user_id == user_id, SavedAddress.is_default.is_(True)
        )
        if keep_id is not None:
            query = query.filter(SavedAddress.address_id != keep_id)
        for address in query.all():
            address.is_default = False


class PaymentMethodRepository(BaseRepository[SavedPaymentMethod]):
    def __init__(self, db: Session):
        super().__init__(db, SavedPaymentMethod)

    def get_by_user_id(self, user_id: UUID) -> List[SavedPaymentMethod]:
        return (
            self.db.query(SavedPaymentMethod)
            .filter(SavedPaymentMethod.user_id == user_id)
            .order_by(SavedPaymentMethod.is_default.desc(), SavedPaymentMethod.created_at)
            .all()
        )

    def get_default(self, user_id: UUID) -> Optional[SavedPaymentMethod]:
        return (
            self.db.query(SavedPaymentMethod)
            .filter(
                SavedPaymentMethod.user_id == user_id,
                SavedPaymentMethod.is_default.is_(True),
            )
            .first()
        )

    def clear_default(self, user_id: UUID, keep_id: UUID = None) -> None:
        """Unset the default flag on every other payment method (no commit)"""
        query = self.db.query(SavedPaymentMethod).filter(
            SavedPaymentMethod.user_id == user_id,
            SavedPaymentMethod.is_default.is_(True),
        )
        if keep_id is not None:
            query = query.filter(SavedPaymentMethod.payment_method_id != keep_id)
        for method in query.all():
            method.is_default = False


class PreferenceSettingsRepository(BaseRepository[UserPreferenceSettings]):
    def __init__(self, db: Session):
        super().__init__(db, UserPreferenceSettings)

    def get_or_create(self, user_id: UUID) -> UserPreferenceSettings:
        settings_row = self.get_by_id(user_id)
        if settings_row is None:
            settings_row = UserPreferenceSettings(user_id=user_id)
            self.db.add(settings_row)
            self.db.flush()
        return settings_row
