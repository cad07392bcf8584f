from sqlalchemy import inspect, text

from canteen.db import create_db_and_tables, engine

LEGACY_BILLS = """
CREATE TABLE bills (
    id VARCHAR PRIMARY KEY,
    bill_number VARCHAR(20) NOT NULL,
    order_id VARCHAR NOT NULL,
    user_id CHAR(36) NOT NULL,
    customer_name VARCHAR(100) NOT NULL,
    items JSON NOT NULL,
    total INTEGER NOT NULL,
    status VARCHAR(20) NOT NULL,
    expires_at DATETIME NOT NULL,
    created_at DATETIME NOT NULL
)
"""


async def bill_columns():
    async with engine.connect() as conn:
        return await conn.run_sync(
            lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns("bills")}
        )


async def test_startup_adds_missing_columns(fresh_db):
    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE bills"))
        await conn.execute(text(LEGACY_BILLS))

    assert "cancellation_reason" not in await bill_columns()

    await create_db_and_tables()

    columns = await bill_columns()
    assert {"register_number", "cancelled_at", "cancellation_reason"} <= columns


async def test_startup_check_is_idempotent(fresh_db):
    await create_db_and_tables()
    before = await bill_columns()
    await create_db_and_tables()
    assert await bill_columns() == before
