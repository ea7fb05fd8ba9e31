from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from datetime import date, timedelta
import logging

from domain.models import PantryItem
from domain.schemas.pantry_schemas import PantryItemCreate, PantryItemUpdate
from domain.constants import GROCERY_CATEGORIES, DEFAULT_CATEGORY, MAX_PANTRY_ITEMS
from repositories import PantryRepository, UserRepository
from app.exceptions import NotFoundError, ServiceValidationError

logger = logging.getLogger("mealplanner.pantry")

# name -> (category, shelf life in days)
COMMON_ITEM_DEFAULTS = {
    "salt": ("Pantry", 730),
    "pepper": ("Pantry", 730),
    "sugar": ("Pantry", 730),
    "olive oil": ("Pantry", 365),
    "flour": ("Pantry", 365),
    "rice": ("Pantry", 365),
    "pasta": ("Pantry", 365),
    "butter": ("Dairy & Eggs", 30),
    "milk": ("Dairy & Eggs", 7),
    "eggs": ("Dairy & Eggs", 21),
    "onions": ("Produce", 30),
    "garlic": ("Produce", 30),
}
UNKNOWN_ITEM_DEFAULT = (DEFAULT_CATEGORY, 30)


class PantryService:
    @staticmethod
    def list_items(db: Session, user_id: UUID) -> List[PantryItem]:
        return PantryRepository(db).get_by_user_id(user_id)

    @staticmethod
    def get_item(db: Session, item_id: UUID) -> PantryItem:
        item = PantryRepository(db).get_by_id(item_id)
        if not item:
            raise NotFoundError(f"Pantry item not found: {item_id}")
        return item

    @staticmethod
    def _ensure_capacity(repo: PantryRepository, user_id: UUID, adding: int = 1):
        if repo.count_for_user(user_id) + adding > MAX_PANTRY_ITEMS:
            raise ServiceValidationError(
                f"Pantry is limited to {MAX_PANTRY_ITEMS} items",
                code="PANTRY_FULL",
            )

    @staticmethod
    def add_item(db: Session, user_id: UUID, data: PantryItemCreate) -> PantryItem:
        if not UserRepository(db).exists(user_id):
            raise NotFoundError(f"User not found: {user_id}")

        repo = PantryRepository(db)
        PantryService._ensure_capacity(repo, user_id)
        item = PantryItem(user_id=user_id, **data.model_dump())
        try:
            item = repo.create(item)
        except Exception:
            db.rollback()
            logger.exception(f"pantry_add_failed user_id={user_id} name={data.name}")
            raise
        logger.info(f"pantry_item_added user_id={user_id} name={item.name}")
        return item

    @staticmethod
    def update_item(db: Session, item_id: UUID, changes: PantryItemUpdate) -> PantryItem:
        repo = PantryRepository(db)
        item = repo.get_by_id(item_id)
        if not item:
            raise NotFoundError(f"Pantry item not found: {item_id}")
        data = changes.model_dump(exclude_unset=True)
        try:
            return repo.apply_changes(item, data)
        except Exception:
            db.rollback()
            logger.exception(f"pantry_update_failed item_id={item_id}")
            raise

    @staticmethod
    def delete_item(db: Session, item_id: UUID) -> bool:
        if not PantryRepository(db).delete(item_id):
            raise NotFoundError(f"Pantry item not found: {item_id}")
        logger.info(f"pantry_item_deleted item_id={item_id}")
        return True

    @staticmethod
    def get_expiring_items(
        db: Session, user_id: UUID, days_ahead: int = 7, today: Optional[date] = None
    ) -> List[PantryItem]:
        """Items expiring between today and today + days_ahead inclusive, soonest first"""
        return PantryRepository(db).get_expiring_items(user_id, days_ahead, today)

    @staticmethod
    def check_item_in_pantry(db: Session, user_id: UUID, name: str) -> Optional[PantryItem]:
        return PantryRepository(db).get_by_name(user_id, name)

    @staticmethod
    def get_items_by_category(db: Session, user_id: UUID) -> Dict[str, List[PantryItem]]:
        grouped: Dict[str, List[PantryItem]] = {}
        for item in PantryRepository(db).get_by_user_id(user_id):
            category = item.category if item.category in GROCERY_CATEGORIES else DEFAULT_CATEGORY
            grouped.setdefault(category, []).append(item)
        return grouped

    @staticmethod
    def add_common_items(
        db: Session, user_id: UUID, names: List[str], today: Optional[date] = None
    ) -> List[PantryItem]:
        """Bulk-add staples with a default category and shelf life"""
        if not UserRepository(db).exists(user_id):
            raise NotFoundError(f"User not found: {user_id}")

        today = today or date.today()
        cleaned = [n.strip() for n in names if n and n.strip()]
        repo = PantryRepository(db)
        PantryService._ensure_capacity(repo, user_id, len(cleaned))

        items = []
        try:
            for name in cleaned:
                category, shelf_life = COMMON_ITEM_DEFAULTS.get(
                    name.lower(), UNKNOWN_ITEM_DEFAULT
                )
                item = PantryItem(
                    user_id=user_id,
                    name=name,
                    quantity="1",
                    category=category,
                    purchase_date=today,
                    expiration_date=today + timedelta(days=shelf_life),
                )
                db.add(item)
                items.append(item)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"pantry_common_items_failed user_id={user_id}")
            raise

        for item in items:
            db.refresh(item)
        logger.info(f"pantry_common_items_added user_id={user_id} count={len(items)}")
        return items
