"""
Grocery lists derived from meal plans.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    Boolean,
    Integer,
    JSON,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class GroceryList(Base):
    """Shopping list generated from a meal plan"""

    __tablename__ = "grocery_list"

    grocery_list_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meal_plan_id = Column(
        Uuid, ForeignKey("meal_plan.meal_plan_id", ondelete="CASCADE"), nullable=True
    )
    total_cost = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    budget_comparison = Column(JSON)  # {"budget", "difference", "status"}
    suggested_swaps = Column(JSON, nullable=False, default=list)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="grocery_lists")
    items = relationship(
        "GroceryListItem",
        back_populates="grocery_list",
        cascade="all, delete-orphan",
        order_by="GroceryListItem.position",
    )


class GroceryListItem(Base):
    """A single aggregated ingredient to buy"""

    __tablename__ = "grocery_list_item"

    item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    grocery_list_id = Column(
        Uuid,
        ForeignKey("grocery_list.grocery_list_id", ondelete="CASCADE"),
        nullable=False,
    )
    position = Column(Integer, nullable=False, default=0)
    name = Column(Text, nullable=False)
    quantity = Column(Text, nullable=False)
    category = Column(Text, nullable=False, default="other")
    estimated_price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    is_in_pantry = Column(Boolean, nullable=False, default=False)
    pantry_quantity = Column(Text)
    checked = Column(Boolean, nullable=False, default=False)

    grocery_list = relationship("GroceryList", back_populates="items")
