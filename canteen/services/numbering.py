import secrets
import string
import time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from canteen.core.config import settings
from canteen.core.constants import BILL_NUMBER_LENGTH, BILL_PREFIX, TOKEN_PREFIX
from canteen.core.errors import InternalError
from canteen.crud.bill import bill_number_exists

BILL_ALPHABET = string.ascii_uppercase + string.digits


def generate_token_number() -> str:
    """Short counter-style token shown to the customer (T-482913).

    Derived from the millisecond clock, so it is readable but not globally unique.
    """
    return f"{TOKEN_PREFIX}{str(int(time.time() * 1000))[-6:]}"


def generate_bill_number() -> str:
    return BILL_PREFIX + "".join(secrets.choice(BILL_ALPHABET) for _ in range(BILL_NUMBER_LENGTH))


async def unique_bill_number(db: AsyncSession, attempts: Optional[int] = None) -> str:
    """Draw bill numbers until one is unused."""
    attempts = attempts or settings.bill_number_attempts
    for _ in range(attempts):
        candidate = generate_bill_number()
        if not await bill_number_exists(db, candidate):
            return candidate
    raise InternalError("Could not allocate a unique bill number")
