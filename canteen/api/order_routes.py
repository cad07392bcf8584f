from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.auth.dependencies import get_any_member, get_current_admin_user, get_current_customer
from canteen.core.constants import Role
from canteen.core.errors import NotFound
from canteen.crud import bill as bill_crud
from canteen.crud import order as order_crud
from canteen.db import get_db
from canteen.models.user import User
from canteen.schemas.order import (
    BillRead,
    CheckoutRequest,
    CheckoutResult,
    OrderRead,
    OrderStatusUpdate,
    OrderWithBill,
)
from canteen.services.checkout import checkout
from canteen.services.notifications import notify_checkout, notify_order_update
from canteen.services.order_status import transition_order

router = APIRouter(tags=["orders"])


def _dump(schema, obj) -> dict:
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


@router.post("/cart/checkout", response_model=CheckoutResult, status_code=201)
async def checkout_cart(
    payload: CheckoutRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_customer),
):
    order, bill = await checkout(db, user, payload.items)
    result = {"order": _dump(OrderRead, order), "bill": _dump(BillRead, bill)}

    # Fire-and-forget, runs after the response is sent
    background_tasks.add_task(notify_checkout, result["order"], result["bill"])
    return result


@router.get("/orders", response_model=List[OrderWithBill])
async def my_orders(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_any_member),
):
    return await order_crud.get_orders_for_user(db, user.id)


@router.get("/orders/all", response_model=List[OrderWithBill])
async def all_orders(
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_admin_user),
):
    return await order_crud.get_all_orders(db, status)


@router.get("/orders/{order_id}", response_model=OrderWithBill)
async def get_order(
    order_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_any_member),
):
    order = await order_crud.get_order(db, order_id)
    # Other users' orders are reported as missing, not forbidden
    if not order or (user.role != Role.admin.value and order.user_id != user.id):
        raise NotFound("Order not found")
    return order


@router.patch("/orders/{order_id}/status", response_model=OrderWithBill)
async def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_admin_user),
):
    order = await transition_order(db, order_id, payload.status, payload.reason)
    updated = _dump(OrderWithBill, order)
    background_tasks.add_task(notify_order_update, updated)
    return updated


@router.get("/bills", response_model=List[BillRead])
async def my_bills(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_any_member),
):
    return await bill_crud.get_bills_for_user(db, user.id)
