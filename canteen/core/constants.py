# canteen/core/constants.py
from enum import Enum


class Role(str, Enum):
    student = "student"
    staff = "staff"
    admin = "admin"


class OrderStatus(str, Enum):
    placed = "placed"
    preparing = "preparing"
    ready = "ready"
    completed = "completed"
    cancelled = "cancelled"


class BillStatus(str, Enum):
    active = "active"
    cancelled = "cancelled"


# Forward order of the kitchen pipeline; cancelled sits outside it
ORDER_PIPELINE = [
    OrderStatus.placed,
    OrderStatus.preparing,
    OrderStatus.ready,
    OrderStatus.completed,
]
TERMINAL_STATUSES = {OrderStatus.completed, OrderStatus.cancelled}

# Realtime rooms and events
STAFF_ROOM = "staff"
EVENT_ORDER_NEW = "order:new"
EVENT_ORDER_UPDATE = "order:update"
EVENT_BILL_NEW = "bill:new"

TOKEN_PREFIX = "T-"
BILL_PREFIX = "B"
BILL_NUMBER_LENGTH = 6
