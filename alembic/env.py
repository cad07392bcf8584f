# alembic/env.py
import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine

import canteen.models  # noqa: F401  registers every table on Base.metadata
from canteen.core.config import settings
from canteen.models.base import Base

if context.config.config_file_name:
    fileConfig(context.config.config_file_name)

if not settings.database_url:
    raise RuntimeError("❌ DATABASE_URL is not set for Alembic")


def _configure(**kwargs):
    context.configure(target_metadata=Base.metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _run_online():
    engine = create_async_engine(settings.database_url)
    async with engine.connect() as conn:
        await conn.run_sync(lambda sync_conn: _configure(connection=sync_conn))
    await engine.dispose()


if context.is_offline_mode():
    _configure(url=settings.database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(_run_online())
