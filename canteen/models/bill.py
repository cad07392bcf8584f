from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Text, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from canteen.models.base import Base, utcnow
import uuid


class Bill(Base):
    """Receipt derived 1:1 from an order at checkout."""
    __tablename__ = "bills"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    bill_number = Column(String(20), nullable=False)  # B7Q2XK, B0A9ZD, etc.
    order_id = Column(String, ForeignKey("orders.id"), nullable=False)
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    customer_name = Column(String(100), nullable=False)
    register_number = Column(String(50), nullable=True)

    items = Column(JSON, nullable=False, default=list)
    total = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="active")  # active, cancelled

    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    order = relationship("Order", back_populates="bill")
    user = relationship("User", back_populates="bills")

    __table_args__ = (
        UniqueConstraint("bill_number", name="uq_bill_number"),
        UniqueConstraint("order_id", name="uq_bill_order"),
        Index("idx_bills_user", "user_id"),
    )
