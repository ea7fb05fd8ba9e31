"""
Grocery Repository - Data access for grocery lists
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import GroceryList, GroceryListItem


class GroceryListRepository(BaseRepository[GroceryList]):
    """Repository for grocery lists"""

    def __init__(self, db: Session):
        super().__init__(db, GroceryList)

    def get_with_items(self, grocery_list_id: UUID) -> Optional[GroceryList]:
        return (
            self.db.query(GroceryList)
            .options(selectinload(GroceryList.items))
            .filter(GroceryList.grocery_list_id == grocery_list_id)
            .first()
        )

    def get_for_plan(self, meal_plan_id: UUID) -> Optional[GroceryList]:
        """Latest list generated for a plan"""
        return (
            self.db.query(GroceryList)
            .options(selectinload(GroceryList.items))
            .filter(GroceryList.meal_plan_id == meal_plan_id)
            .order_by(GroceryList.created_at.desc())
            .first()
        )

    def delete_for_plan(self, meal_plan_id: UUID) -> int:
        """Remove earlier lists for a plan before it is regenerated (no commit)"""
        lists = (
            self.db.query(GroceryList)
            .filter(GroceryList.meal_plan_id == meal_plan_id)
            .all()
        )
        for grocery_list in lists:
            self.db.delete(grocery_list)
        return len(lists)


class GroceryListItemRepository(BaseRepository[GroceryListItem]):
    """Repository for grocery list lines"""

    def __init__(self, db: Session):
        super().__init__(db, GroceryListItem)

    def get_by_name(self, grocery_list_id: UUID, name: str) -> Optional[GroceryListItem]:
        return (
            self.db.query(GroceryListItem)
            .filter(
                GroceryListItem.grocery_list_id == grocery_list_id,
                func.lower(GroceryListItem.name) == name.strip().lower(),
            )
            .first()
        )
