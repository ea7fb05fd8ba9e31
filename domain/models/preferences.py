"""
Checkout and planning preferences: saved addresses, payment methods,
delivery/shopping/meal-plan preference documents.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Boolean,
    Integer,
    JSON,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import PaymentMethodType


class SavedAddress(Base):
    """Delivery address; at most one per user is the default"""

    __tablename__ = "saved_address"

    address_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label = Column(Text, nullable=False)
    street = Column(Text, nullable=False)
    apartment = Column(Text)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    zip_code = Column(Text, nullable=False)
    delivery_instructions = Column(Text)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="saved_addresses")


class SavedPaymentMethod(Base):
    """Tokenless payment method summary; at most one per user is the default"""

    __tablename__ = "saved_payment_method"

    payment_method_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(SQLEnum(PaymentMethodType), nullable=False)
    label = Column(Text, nullable=False)
    last4 = Column(Text)
    expiry_month = Column(Integer)
    expiry_year = Column(Integer)
    card_brand = Column(Text)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="payment_methods")


class UserPreferenceSettings(Base):
    """Delivery, shopping and meal-plan preference documents (merged on update)"""

    __tablename__ = "user_preference_settings"

    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    delivery = Column(JSON)
    shopping = Column(JSON)
    meal_plan = Column(JSON)
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="preference_settings")
