import logging

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.schema import CreateColumn

from canteen.core.config import settings
from canteen.models.base import Base

log = logging.getLogger(__name__)

DATABASE_URL = settings.database_url
if not DATABASE_URL:
    raise ValueError("❌ DATABASE_URL is not set!")

engine_kwargs = {"echo": settings.sql_echo}
if not DATABASE_URL.startswith("sqlite"):
    engine_kwargs.update(pool_pre_ping=True, pool_size=10, max_overflow=0)

# Create engine
engine = create_async_engine(DATABASE_URL, **engine_kwargs)

# Async session maker
async_session = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Dependency
async def get_db():
    async with async_session() as session:
        yield session


def _add_missing_columns(conn) -> list[str]:
    """ALTER TABLE ... ADD COLUMN for model columns an existing table lacks."""
    inspector = inspect(conn)
    existing_tables = set(inspector.get_table_names())
    added = []
    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            continue
        present = {c["name"] for c in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in present or column.primary_key:
                continue
            if not column.nullable and column.server_default is None:
                log.warning("⚠️ Cannot add NOT NULL column %s.%s without a default; run migrations", table.name, column.name)
                continue
            ddl = CreateColumn(column).compile(dialect=conn.dialect)
            conn.exec_driver_sql(f"ALTER TABLE {table.name} ADD COLUMN {ddl}")
            added.append(f"{table.name}.{column.name}")
    return added


async def create_db_and_tables():
    import canteen.models  # registers all models

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        added = await conn.run_sync(_add_missing_columns)
    for name in added:
        log.info("🔧 Added missing column %s", name)
