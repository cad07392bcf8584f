from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from fastapi_users_db_sqlalchemy.generics import GUID
from canteen.models.base import Base, utcnow
import uuid


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    customer_name = Column(String(100), nullable=False)
    token_number = Column(String(20), nullable=False)

    # Snapshot of [{menuId, qty, price, name}] at checkout time
    items = Column(JSON, nullable=False, default=list)
    total = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="placed")

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="orders")
    bill = relationship("Bill", back_populates="order", uselist=False)

    __table_args__ = (
        Index("idx_orders_user", "user_id"),
        Index("idx_orders_created_at", "created_at"),
    )
