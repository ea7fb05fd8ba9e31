"""
Household member sub-profiles and per-member food feedback.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Integer,
    Boolean,
    JSON,
    Uuid,
    CheckConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import MemberRelationship, PortionSize, SpicePreference


def _default_meal_preferences():
    return {"breakfast": True, "lunch": True, "dinner": True, "snacks": True}


class HouseholdMember(Base):
    """Per-person dietary preferences under a user account"""

    __tablename__ = "household_member"

    member_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(Text, nullable=False)
    age = Column(Integer)
    relationship_type = Column(
        "relationship",
        SQLEnum(MemberRelationship),
        nullable=False,
        default=MemberRelationship.OTHER,
    )
    dietary_restrictions = Column(JSON, nullable=False, default=list)
    cuisine_preferences = Column(JSON, nullable=False, default=list)
    allergens = Column(JSON, nullable=False, default=list)
    disliked_ingredients = Column(JSON, nullable=False, default=list)
    favorite_ingredients = Column(JSON, nullable=False, default=list)
    meal_preferences = Column(JSON, nullable=False, default=_default_meal_preferences)
    portion_size = Column(
        SQLEnum(PortionSize), nullable=False, default=PortionSize.REGULAR
    )
    spice_preference = Column(
        SQLEnum(SpicePreference), nullable=False, default=SpicePreference.MILD
    )
    advanced_nutrition = Column(JSON)  # {"enabled", "daily_calories", "macros": {...}}
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="household_members")
    feedback = relationship(
        "FoodPreferenceFeedback",
        back_populates="member",
        cascade="all, delete-orphan",
    )


class FoodPreferenceFeedback(Base):
    """A household member's rating of a recipe they ate"""

    __tablename__ = "food_preference_feedback"

    feedback_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id = Column(
        Uuid,
        ForeignKey("household_member.member_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recipe_name = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    liked_ingredients = Column(JSON, nullable=False, default=list)
    disliked_ingredients = Column(JSON, nullable=False, default=list)
    would_eat_again = Column(Boolean, nullable=False, default=True)
    comment = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    member = relationship("HouseholdMember", back_populates="feedback")

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_member_feedback_rating"),
    )
