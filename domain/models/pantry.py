"""
Pantry inventory model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Date, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class PantryItem(Base):
    """Something the household already has at home"""

    __tablename__ = "pantry_item"

    pantry_item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(Text, nullable=False)
    quantity = Column(Text, nullable=False, default="1")  # free text, e.g. "2 lbs"
    category = Column(Text, nullable=False, default="Other")
    purchase_date = Column(Date)
    expiration_date = Column(Date)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="pantry_items")
