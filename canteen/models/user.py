from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from fastapi_users.db import SQLAlchemyBaseUserTableUUID

from canteen.models.base import Base, utcnow


class User(SQLAlchemyBaseUserTableUUID, Base):
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="student")  # "student", "staff", "admin"
    register_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    orders = relationship("Order", back_populates="user")
    bills = relationship("Bill", back_populates="user")
