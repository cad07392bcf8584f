"""
Checkout workflow

Turns a cart (menu id + qty pairs) into an order and its derived bill.
Every line is validated before anything is written, and the order and bill
rows are committed together so an order never exists without its bill.
"""
import logging
import uuid
from datetime import timedelta
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.config import settings
from canteen.core.constants import BillStatus, OrderStatus
from canteen.core.errors import InternalError, ItemUnavailable, ValidationError
from canteen.crud.menu import get_menu_items_by_ids
from canteen.models.base import utcnow
from canteen.models.bill import Bill
from canteen.models.order import Order
from canteen.models.user import User
from canteen.schemas.order import CartLine
from canteen.services.numbering import generate_token_number, unique_bill_number

log = logging.getLogger(__name__)


async def price_cart(db: AsyncSession, lines: List[CartLine]) -> Tuple[list[dict], int]:
    """Validate each line against the live menu and price it server-side.

    Returns the order line snapshots and their total. Raises before any write
    if a line references a missing or unavailable item.
    """
    if not lines:
        raise ValidationError("items required")

    menu = await get_menu_items_by_ids(db, list({line.menu_id for line in lines}))

    priced = []
    for line in lines:
        item = menu.get(line.menu_id)
        if not item or not item.available:
            raise ItemUnavailable(f"Item {line.menu_id} unavailable")
        priced.append({
            "menuId": item.id,
            "qty": line.qty,
            "price": item.price,
            "name": item.name,
        })

    total = sum(p["price"] * p["qty"] for p in priced)
    return priced, total


def _is_bill_number_clash(exc: IntegrityError) -> bool:
    text = str(exc.orig)
    return "uq_bill_number" in text or "bills.bill_number" in text


async def checkout(db: AsyncSession, user: User, lines: List[CartLine]) -> Tuple[Order, Bill]:
    priced, total = await price_cart(db, lines)

    # A rollback expires the user row, so read what the rows need up front
    user_id, name, register_number = user.id, user.name, user.register_number

    now = utcnow()
    order = Order(
        id=str(uuid.uuid4()),
        user_id=user_id,
        customer_name=name,
        token_number=generate_token_number(),
        items=priced,
        total=total,
        status=OrderStatus.placed.value,
        created_at=now,
        updated_at=now,
    )

    bill = Bill(
        id=str(uuid.uuid4()),
        order_id=order.id,
        user_id=user_id,
        customer_name=name,
        register_number=register_number,
        items=[dict(p) for p in priced],
        total=total,
        status=BillStatus.active.value,
        created_at=now,
        expires_at=now + timedelta(minutes=settings.bill_ttl_minutes),
    )

    # Single unit of work: both rows or neither. The exists-check in
    # unique_bill_number can race a concurrent checkout, so a unique
    # constraint hit on bill_number redraws instead of failing.
    for _ in range(settings.bill_number_attempts):
        bill.bill_number = await unique_bill_number(db)
        db.add(order)
        db.add(bill)
        try:
            await db.commit()
            break
        except IntegrityError as e:
            await db.rollback()
            if not _is_bill_number_clash(e):
                log.exception("❌ Checkout failed for user %s; nothing written", user_id)
                raise
            log.warning("⚠️ Bill number %s taken during checkout, redrawing", bill.bill_number)
        except SQLAlchemyError:
            await db.rollback()
            log.exception("❌ Checkout failed for user %s; nothing written", user_id)
            raise
    else:
        raise InternalError("Could not allocate a unique bill number")

    log.info(
        "🧾 Order %s (%s) placed by %s: %d line(s), total %d, bill %s",
        order.id, order.token_number, user_id, len(priced), total, bill.bill_number,
    )
    return order, bill
