from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from canteen.models.order import Order
from canteen.models.base import utcnow


async def get_order(db: AsyncSession, order_id: str) -> Optional[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.bill))
    )
    return result.scalar_one_or_none()


async def get_orders_for_user(db: AsyncSession, user_id):
    """Orders placed by one user, newest first"""
    result = await db.execute(
        select(Order)
        .where(Order.user_id == user_id)
        .options(selectinload(Order.bill))
        .order_by(Order.created_at.desc())
    )
    return result.scalars().all()


async def get_all_orders(db: AsyncSession, status: Optional[str] = None):
    """Every order, newest first"""
    query = select(Order).options(selectinload(Order.bill))
    if status:
        query = query.where(Order.status == status)
    result = await db.execute(query.order_by(Order.created_at.desc()))
    return result.scalars().all()


def set_order_status(order: Order, status: str) -> Order:
    order.status = status
    order.updated_at = utcnow()
    return order
