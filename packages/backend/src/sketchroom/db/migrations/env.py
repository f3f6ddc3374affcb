"""Alembic environment for the sketchroom schema.

Learn: Migrations run through the same build_engine() the app uses, so
SQLite gets its foreign-key pragma here too. The target database is
SKETCHROOM_DATABASE_URL unless overridden on the command line:

    alembic -x url=sqlite+aiosqlite:///./dev.db upgrade head
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

from sketchroom.config import settings
from sketchroom.db.engine import build_engine
from sketchroom.db.models import Base

config = context.config

database_url = context.get_x_argument(as_dictionary=True).get(
    "url", settings.database_url
)
config.set_main_option("sqlalchemy.url", database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    # SQLite can't ALTER most constraints in place
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=database_url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    _configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = build_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
