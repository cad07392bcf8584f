from .base import Base
from .user import User
from .menu_item import MenuItem
from .order import Order
from .bill import Bill

__all__ = [
    "Base",
    "User",
    "MenuItem",
    "Order",
    "Bill",
]
