from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from canteen.core.constants import BillStatus
from canteen.models.bill import Bill
from canteen.models.base import utcnow


async def get_bills_for_user(db: AsyncSession, user_id):
    """Bills issued to one user, newest first"""
    result = await db.execute(
        select(Bill)
        .where(Bill.user_id == user_id)
        .order_by(Bill.created_at.desc())
    )
    return result.scalars().all()


async def bill_number_exists(db: AsyncSession, bill_number: str) -> bool:
    result = await db.execute(select(Bill.id).where(Bill.bill_number == bill_number))
    return result.first() is not None


def cancel_bill(bill: Bill, reason: Optional[str] = None) -> Bill:
    """Record cancellation on a bill; caller commits."""
    if bill.status == BillStatus.cancelled.value:
        return bill
    bill.status = BillStatus.cancelled.value
    bill.cancelled_at = utcnow()
    bill.cancellation_reason = (reason or "").strip() or "Order cancelled"
    return bill
