import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, computed_field

from canteen.models.base import utcnow
from canteen.schemas.base import CamelModel


class CartLine(CamelModel):
    menu_id: str = Field(..., min_length=1)
    qty: int = Field(1, ge=1)


class CheckoutRequest(CamelModel):
    items: List[CartLine] = Field(default_factory=list)


class OrderLine(CamelModel):
    menu_id: str
    qty: int
    price: int
    name: str


class BillRead(CamelModel):
    id: str
    bill_number: str
    order_id: str
    user_id: uuid.UUID
    customer_name: str
    register_number: Optional[str] = None
    items: List[OrderLine]
    total: int
    status: str
    expires_at: datetime
    created_at: datetime
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None

    @computed_field
    @property
    def expired(self) -> bool:
        return utcnow() >= self.expires_at


class OrderRead(CamelModel):
    id: str
    user_id: uuid.UUID
    customer_name: str
    token_number: str
    items: List[OrderLine]
    total: int
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class OrderWithBill(OrderRead):
    bill: Optional[BillRead] = None


class CheckoutResult(CamelModel):
    order: OrderRead
    bill: BillRead


class OrderStatusUpdate(CamelModel):
    status: str
    reason: Optional[str] = Field(default=None, max_length=500)
