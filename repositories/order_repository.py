"""
Order Repository - Data access for simulated delivery orders
"""

from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import ShoppingOrder


class OrderRepository(BaseRepository[ShoppingOrder]):
    def __init__(self, db: Session):
        super().__init__(db, ShoppingOrder)

    def get_by_user_id(self, user_id: UUID) -> List[ShoppingOrder]:
        """Orders for a user, newest first"""
        return (
            self.db.query(ShoppingOrder)
            .filter(ShoppingOrder.user_id == user_id)
            .order_by(ShoppingOrder.placed_at.desc())
            .all()
        )
