"""
Household calendar events that affect meal planning.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Date,
    Boolean,
    JSON,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import CalendarEventType, MealType


class CalendarEvent(Base):
    """Dinner out, travel, a busy day, ..."""

    __tablename__ = "calendar_event"

    event_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(Text, nullable=False)
    event_type = Column(SQLEnum(CalendarEventType), nullable=False)
    date = Column(Date, nullable=False)
    meal_type = Column(SQLEnum(MealType), nullable=True)  # None = whole day
    notes = Column(Text)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence = Column(JSON)  # {"frequency", "interval", "end_date", "occurrences"}
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="calendar_events")
