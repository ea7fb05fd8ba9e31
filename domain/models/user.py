"""
User account and profile model.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    Integer,
    Numeric,
    Boolean,
    JSON,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import CookingSkillLevel


class AppUser(Base):
    """User account with the household-level planning profile"""

    __tablename__ = "app_user"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    display_name = Column(Text)
    household_size = Column(Integer, nullable=False, default=4)
    dietary_restrictions = Column(JSON, nullable=False, default=list)
    cuisine_preferences = Column(JSON, nullable=False, default=list)
    cooking_skill_level = Column(
        SQLEnum(CookingSkillLevel),
        nullable=False,
        default=CookingSkillLevel.INTERMEDIATE,
    )
    weekly_budget = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=150)
    weekday_cooking_minutes = Column(Integer, nullable=False, default=30)
    weekend_cooking_minutes = Column(Integer, nullable=False, default=60)
    goals = Column(JSON, nullable=False, default=list)
    onboarding_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    household_members = relationship(
        "HouseholdMember", back_populates="user", cascade="all, delete-orphan"
    )
    pantry_items = relationship(
        "PantryItem", back_populates="user", cascade="all, delete-orphan"
    )
    meal_plans = relationship(
        "MealPlan", back_populates="user", cascade="all, delete-orphan"
    )
    grocery_lists = relationship(
        "GroceryList", back_populates="user", cascade="all, delete-orphan"
    )
    meal_feedback = relationship(
        "MealFeedback", back_populates="user", cascade="all, delete-orphan"
    )
    calendar_events = relationship(
        "CalendarEvent", back_populates="user", cascade="all, delete-orphan"
    )
    saved_addresses = relationship(
        "SavedAddress", back_populates="user", cascade="all, delete-orphan"
    )
    payment_methods = relationship(
        "SavedPaymentMethod", back_populates="user", cascade="all, delete-orphan"
    )
    preference_settings = relationship(
        "UserPreferenceSettings",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    orders = relationship(
        "ShoppingOrder", back_populates="user", cascade="all, delete-orphan"
    )
