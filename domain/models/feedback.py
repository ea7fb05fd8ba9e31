"""
Thumbs-up / thumbs-down feedback on planned meals.
"""

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, JSON, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import FeedbackRating


class MealFeedback(Base):
    """User feedback on a meal from one of their plans"""

    __tablename__ = "meal_feedback"

    feedback_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meal_plan_id = Column(Uuid, nullable=True)
    meal_id = Column(Uuid, nullable=True, index=True)
    recipe_name = Column(Text, nullable=False)
    rating = Column(SQLEnum(FeedbackRating), nullable=False)
    reasons = Column(JSON, nullable=False, default=list)
    comment = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="meal_feedback")
