"""
Simulated grocery delivery orders.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Numeric,
    JSON,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from domain.models.database import Base
from domain.enums import OrderStatus


class ShoppingOrder(Base):
    """Checkout result; status afterwards is derived from the order's age"""

    __tablename__ = "shopping_order"

    order_id = Column(Text, primary_key=True)  # order_{ms}_{suffix}
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    store_id = Column(Text, nullable=False)
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    delivery_fee = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    service_fee = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    tax = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    tip = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    total = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    delivery_slot = Column(JSON, nullable=False)
    delivery_address = Column(JSON)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.CONFIRMED)
    placed_at = Column(TIMESTAMP, nullable=False)
    estimated_delivery = Column(TIMESTAMP)
    tracking_url = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    user = relationship("AppUser", back_populates="orders")
