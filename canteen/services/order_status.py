import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.constants import ORDER_PIPELINE, TERMINAL_STATUSES, OrderStatus
from canteen.core.errors import NotFound, ValidationError
from canteen.crud.bill import cancel_bill
from canteen.crud.order import get_order, set_order_status
from canteen.models.order import Order

log = logging.getLogger(__name__)


def check_transition(current: OrderStatus, target: OrderStatus) -> None:
    """Raise ValidationError unless ``current -> target`` is a legal move.

    Orders only move forward through the pipeline (skipping stages is fine)
    and can be cancelled from any non-terminal state.
    """
    if current in TERMINAL_STATUSES:
        raise ValidationError("Cannot modify completed or cancelled orders")
    if target == OrderStatus.cancelled:
        return
    if ORDER_PIPELINE.index(target) <= ORDER_PIPELINE.index(current):
        raise ValidationError(f"Cannot move order from {current.value} to {target.value}")


async def transition_order(
    db: AsyncSession,
    order_id: str,
    status: str,
    reason: Optional[str] = None,
) -> Order:
    try:
        target = OrderStatus(status)
    except ValueError:
        raise ValidationError("Invalid status")

    order = await get_order(db, order_id)
    if not order:
        raise NotFound("Order not found")

    current = OrderStatus(order.status)
    check_transition(current, target)

    set_order_status(order, target.value)
    if target == OrderStatus.cancelled and order.bill:
        cancel_bill(order.bill, reason)

    await db.commit()
    log.info("🔁 Order %s: %s -> %s", order.id, current.value, target.value)
    return order
