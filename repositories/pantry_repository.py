"""
Pantry Repository - Data access layer for pantry operations
"""

from typing import List, Optional
from uuid import UUID
from datetime import date, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import and_, func

from repositories.base import BaseRepository
from domain.models import PantryItem


class PantryRepository(BaseRepository[PantryItem]):
    """Repository for pantry item data access"""

    def __init__(self, db: Session):
        super().__init__(db, PantryItem)

    def get_by_user_id(self, user_id: UUID) -> List[PantryItem]:
        """Get all pantry items for a user ordered by category, then name"""
        return (
            self.db.query(PantryItem)
            .filter(PantryItem.user_id == user_id)
            .order_by(PantryItem.category, PantryItem.name)
            .all()
        )

    def count_for_user(self, user_id: UUID) -> int:
        return (
            self.db.query(func.count(PantryItem.pantry_item_id))
            .filter(PantryItem.user_id == user_id)
            .scalar()
        )

    def get_by_name(self, user_id: UUID, name: str) -> Optional[PantryItem]:
        """Case-insensitive, whitespace-trimmed name match"""
        return (
            self.db.query(PantryItem)
            .filter(
                and_(
                    PantryItem.user_id == user_id,
                    func.lower(func.trim(PantryItem.name)) == name.strip().lower(),
                )
            )
            .first()
        )

    def get_expiring_items(
        self, user_id: UUID, within_days: int, today: date = None
    ) -> List[PantryItem]:
        """Get pantry items expiring between today and today + within_days"""
        today = today or date.today()
        cutoff_date = today + timedelta(days=within_days)
        return (
            self.db.query(PantryItem)
            .filter(
                and_(
                    PantryItem.user_id == user_id,
                    PantryItem.expiration_date.isnot(None),
                    PantryItem.expiration_date >= today,
                    PantryItem.expiration_date <= cutoff_date,
                )
            )
            .order_by(PantryItem.expiration_date)
            .all()
        )
