from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    # Naive UTC, stored the same way on sqlite and postgres
    return datetime.now(timezone.utc).replace(tzinfo=None)
