"""
Meal planning models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    Date,
    Integer,
    JSON,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import BudgetStatus, MealType


class MealPlan(Base):
    """A generated week of meals"""

    __tablename__ = "meal_plan"

    meal_plan_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    week_start_date = Column(Date, nullable=False)
    total_estimated_cost = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    weekly_budget = Column(Numeric(10, 2, asdecimal=False))
    budget_status = Column(
        SQLEnum(BudgetStatus), nullable=False, default=BudgetStatus.UNDER
    )
    swap_count = Column(Integer, nullable=False, default=0)
    grocery_list_id = Column(Uuid, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="meal_plans")
    meals = relationship(
        "MealEntry",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="[MealEntry.day_of_week, MealEntry.position]",
    )


class MealEntry(Base):
    """One meal slot within a plan"""

    __tablename__ = "meal_entry"

    meal_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    meal_plan_id = Column(
        Uuid,
        ForeignKey("meal_plan.meal_plan_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week = Column(Integer, nullable=False)  # 0..6 from week_start_date
    position = Column(Integer, nullable=False, default=0)
    meal_type = Column(SQLEnum(MealType), nullable=False)
    recipe_name = Column(Text, nullable=False)
    description = Column(Text)
    prep_time = Column(Integer, nullable=False, default=0)
    cook_time = Column(Integer, nullable=False, default=0)
    servings = Column(Integer, nullable=False, default=4)
    estimated_cost = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    ingredients = Column(JSON, nullable=False, default=list)
    instructions = Column(JSON, nullable=False, default=list)
    recipe_id = Column(Text)
    image_url = Column(Text)
    nutrition = Column(JSON)
    notes = Column(Text)

    plan = relationship("MealPlan", back_populates="meals")
