from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, CheckConstraint
from canteen.models.base import Base, utcnow
import uuid


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    price = Column(Integer, nullable=False)
    available = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_menu_items_price_non_negative"),
    )
